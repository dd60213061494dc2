import logging

from config import Config
from file_key_pair_provider import FileKeyPairProvider, static_password_finder
from helpers import GenericHandler

logger = logging.getLogger(__name__)

"""
RFC4253, 6.6. Public Key Algorithms

	The key type MUST always be explicitly known (from algorithm
	negotiation or some other source).  It is not normally included in
	the key blob.

	Signatures are encoded as follows:

		string	signature format identifier (as specified by the
				public key/certificate format)
		byte[n]	signature blob in format specific encoding.

RFC8332, 3. New RSA Public Key Algorithms

	The public key algorithms "rsa-sha2-256" and "rsa-sha2-512" use the
	"ssh-rsa" key format, so one RSA host key serves all three names.
"""


class AlgorithmNotAvailable(Exception):
	...



class PublicKeyHandler(GenericHandler):

	def __init__(self, key_pairs):
		self.key_pairs = list(key_pairs)

		# Selected algorithm and the key pair serving it
		self.algorithm = None
		self.key_pair = None


	@classmethod
	def from_config(cls):
		password_finder = None
		if Config.HOST_KEY_PASSPHRASE is not None:
			password_finder = static_password_finder(Config.HOST_KEY_PASSPHRASE)

		provider = FileKeyPairProvider(Config.HOST_KEYS, password_finder, Config.KEY_PROVIDER)
		handler = cls(provider.load_keys())
		if not handler.key_pairs:
			logger.warning("No host keys could be loaded from %s", Config.HOST_KEYS)
		return handler


	@property
	def available_algorithms(self):
		"""
		Host key algorithms we can offer, highest priority first. Only
		algorithms that one of our key pairs can sign with are listed.
		"""
		return [
			alg for alg in super().available_algorithms
			if self.find_key_pair(alg) is not None]


	def find_key_pair(self, alg):
		for key_pair in self.key_pairs:
			if alg in key_pair.signature_algorithms:
				return key_pair
		return None


	def set_algorithm(self, alg):
		info = self.algorithms.get(alg, None)
		if info is None:
			raise AlgorithmNotAvailable(f"algorithm {alg} not handled")

		if not info.get("available"):
			raise AlgorithmNotAvailable(f"algorithm {alg} not available")

		key_pair = self.find_key_pair(alg)
		if key_pair is None:
			raise AlgorithmNotAvailable(f"no host key for algorithm {alg}")

		self.algorithm = alg
		self.key_pair = key_pair


	@property
	def key_b(self):
		if self.key_pair is None:
			return None
		return self.key_pair.key_blob


	def sign(self, data):
		if self.key_pair is None:
			raise AlgorithmNotAvailable("no host key algorithm selected")
		return self.key_pair.sign(data, self.algorithm)



# List of host key algorithms
# Higher prio = first
PublicKeyHandler.algorithms = {
	"ssh-ed25519": {
		"available": True,
		"priority": 1100},
	"ecdsa-sha2-nistp256": {
		"available": True,
		"priority": 1050},
	"ecdsa-sha2-nistp384": {
		"available": True,
		"priority": 1040},
	"ecdsa-sha2-nistp521": {
		"available": True,
		"priority": 1030},
	"rsa-sha2-512": {
		"available": True,
		"priority": 1020},
	"rsa-sha2-256": {
		"available": True,
		"priority": 1010},
	"ssh-rsa": {
		"available": True,
		"priority": 1000},
	"ssh-dss": {
		"available": False,
		"priority": -1000},
}
