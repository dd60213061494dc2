"""
Registry of cryptographic providers able to turn encoded key material
into key objects.

A provider maps an algorithm family ("rsa", "dsa", "ecc") to an import
function taking (encoded, passphrase). Key loading looks its provider up
by name, so a provider has to be registered before any key is read.
"""
import logging
from collections import OrderedDict

from Crypto.PublicKey import DSA, ECC, RSA

logger = logging.getLogger(__name__)


class ProviderNotRegistered(Exception):
	...



class CryptoProvider:

	def __init__(self, name, importers):
		self.name = name
		self.importers = dict(importers)

	def __repr__(self):
		return f"<CryptoProvider {self.name} {sorted(self.importers)}>"

	def supports(self, family):
		return family in self.importers

	def import_key(self, family, encoded, passphrase=None):
		importer = self.importers.get(family, None)
		if importer is None:
			raise ValueError(f"{self.name} cannot import {family} keys")
		return importer(encoded, passphrase)



_providers = OrderedDict()


def register_provider(provider):
	if provider.name in _providers:
		logger.debug("Replacing registered provider %s", provider.name)
	_providers[provider.name] = provider


def unregister_provider(name):
	return _providers.pop(name, None)


def is_registered(name):
	return name in _providers


def get_provider(name):
	provider = _providers.get(name, None)
	if provider is None:
		raise ProviderNotRegistered(f"{name} must be registered as a cryptographic provider")
	return provider


def registered_providers():
	return list(_providers)


PYCRYPTODOME = CryptoProvider("pycryptodome", {
	"rsa": RSA.import_key,
	"dsa": DSA.import_key,
	"ecc": ECC.import_key,
})

register_provider(PYCRYPTODOME)
