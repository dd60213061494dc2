import logging
import os
from collections import namedtuple

import security_providers
from config import Config
from key_pair import KeyPair
from pem_parser import (
	KeyLoadError,
	MalformedPEM,
	PEMEncryptedKeyPair,
	PEMKeyConverter,
	PEMKeyPair,
	PEMObject,
	PEMParser,
	UnsupportedPEMObject)
from security_providers import ProviderNotRegistered

logger = logging.getLogger(__name__)


# Outcome of loading one file. Exactly one of key_pair and error is set.
KeyLoadResult = namedtuple("KeyLoadResult", ["filename", "key_pair", "error"])


def static_password_finder(password):
	def find_password():
		return password
	return find_password


def env_password_finder(name):
	def find_password():
		password = os.environ.get(name, None)
		if password is None:
			raise KeyLoadError(f"Environment variable {name} is not set")
		return password
	return find_password



class FileKeyPairProvider:
	"""
	Loads private keys from the given files.

	password_finder is an optional callable returning the passphrase for
	encrypted keys. Without one, encrypted keys are skipped.

	Files that cannot be read or parsed are logged and skipped, so the
	keys yielded can be fewer than the files configured.
	"""

	def __init__(self, files=(), password_finder=None, provider=None):
		self.files = list(files)
		self.password_finder = password_finder
		self.provider = provider or Config.KEY_PROVIDER


	def load_keys(self):
		self._check_provider()
		return self._iter_keys()

	def load_results(self):
		self._check_provider()
		return self._iter_results()


	def _check_provider(self):
		if not security_providers.is_registered(self.provider):
			raise ProviderNotRegistered(
				f"{self.provider} must be registered as a cryptographic provider")

	def _iter_keys(self):
		for result in self._iter_results():
			if result.key_pair is not None:
				yield result.key_pair

	def _iter_results(self):
		for filename in list(self.files):
			try:
				key_pair = self.load_key(filename)
			except ProviderNotRegistered:
				raise
			except Exception as e:
				logger.warning("Unable to read key %s: %s", filename, e, exc_info=True)
				yield KeyLoadResult(filename, None, e)
				continue

			logger.debug("Loaded %s key %s from %s",
				key_pair.algorithm, key_pair.fingerprint, filename)
			yield KeyLoadResult(filename, key_pair, None)


	def load_key(self, filename):
		with open(filename, "r", encoding="ascii") as f:
			text = f.read()

		parser = PEMParser(text)
		o = parser.read_object()

		# openssl ecparam -genkey writes the curve parameters first
		while isinstance(o, PEMObject) and o.marker.endswith(" PARAMETERS"):
			o = parser.read_object()

		if o is None:
			raise MalformedPEM(f"No PEM object found in {filename}")

		converter = PEMKeyConverter(self.provider)

		if isinstance(o, PEMEncryptedKeyPair):
			if self.password_finder is None:
				raise KeyLoadError(f"{filename} is encrypted and no password finder is set")
			o = o.decrypt_key_pair(self._find_password())

		if isinstance(o, PEMKeyPair):
			o = converter.get_key_pair(o, source=filename)

		if isinstance(o, KeyPair):
			return o

		raise UnsupportedPEMObject(f"{filename} holds {o!r}, not a key pair")


	def _find_password(self):
		try:
			password = self.password_finder()
		except KeyLoadError:
			raise
		except Exception as e:
			raise KeyLoadError(f"Password finder failed: {e!r}") from e
		if isinstance(password, str):
			password = password.encode("utf-8")
		return password
