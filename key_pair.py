import base64
from Crypto.Hash import SHA1, SHA256, SHA384, SHA512
from Crypto.PublicKey import DSA, ECC, RSA
from Crypto.Signature import DSS, eddsa, pkcs1_15

from helpers import WriteHelper

"""
RFC4253, 6.6. Public Key Algorithms

	The "ssh-rsa" key format has the following specific encoding:

		string	"ssh-rsa"
		mpint	e
		mpint	n

	The "ssh-dss" key format has the following specific encoding:

		string	"ssh-dss"
		mpint	p
		mpint	q
		mpint	g
		mpint	y

RFC5656, 3.1. Key Format

	The "ecdsa-sha2-*" key formats all have the following encoding:

		string	"ecdsa-sha2-[identifier]"
		byte[n]	ecc_key_blob

	The ecc_key_blob value has the following specific encoding:

		string	[identifier]
		string	Q

	The string [identifier] is the identifier of the elliptic curve
	domain parameters. Q is the public key encoded from an elliptic
	curve point into an octet string.

RFC8709, 4. Public Key Format

		string	"ssh-ed25519"
		string	key
"""


# pycryptodome curve description -> (SSH key format, curve identifier, hash)
ECDSA_CURVES = {
	"NIST P-256": ("ecdsa-sha2-nistp256", "nistp256", SHA256),
	"NIST P-384": ("ecdsa-sha2-nistp384", "nistp384", SHA384),
	"NIST P-521": ("ecdsa-sha2-nistp521", "nistp521", SHA512),
}

EDDSA_CURVES = {
	"Ed25519": "ssh-ed25519",
}

# RSA signature algorithms and their hash, RFC8332
RSA_SIGNATURES = {
	"ssh-rsa": SHA1,
	"rsa-sha2-256": SHA256,
	"rsa-sha2-512": SHA512,
}


def key_algorithm(key):
	"""
	The SSH public key format name for a pycryptodome key object.
	"""
	if isinstance(key, RSA.RsaKey):
		return "ssh-rsa"
	if isinstance(key, DSA.DsaKey):
		return "ssh-dss"
	if isinstance(key, ECC.EccKey):
		if key.curve in ECDSA_CURVES:
			return ECDSA_CURVES[key.curve][0]
		if key.curve in EDDSA_CURVES:
			return EDDSA_CURVES[key.curve]
		raise ValueError(f"Curve {key.curve} has no SSH key format")
	raise ValueError(f"Unsupported key type {type(key).__name__}")



class KeyPair:

	def __init__(self, private_key, source=None):
		if not private_key.has_private():
			raise ValueError("A key pair needs the private key")

		self.private_key = private_key
		self.public_key = private_key.public_key()
		self.algorithm = key_algorithm(private_key)

		# File the pair was loaded from, if any
		self.source = source

		self._key_blob = None


	def __repr__(self):
		return f"<KeyPair {self.algorithm} {self.fingerprint} source={self.source!r}>"

	def __eq__(self, other):
		if not isinstance(other, KeyPair):
			return NotImplemented
		return self.key_blob == other.key_blob

	def __hash__(self):
		return hash(self.key_blob)


	@property
	def key_blob(self):
		if self._key_blob is None:
			self._key_blob = self._write_key_blob()
		return self._key_blob

	@property
	def fingerprint(self):
		digest = SHA256.new(self.key_blob).digest()
		return "SHA256:" + base64.b64encode(digest).decode("ascii").rstrip("=")

	@property
	def signature_algorithms(self):
		"""
		Signature algorithm names this key pair can produce. DSA keys load
		fine but are never offered for signing.
		"""
		if self.algorithm == "ssh-rsa":
			return list(RSA_SIGNATURES)
		if self.algorithm == "ssh-dss":
			return []
		return [self.algorithm]


	def _write_key_blob(self):
		key = self.public_key
		w = WriteHelper()
		w.write_string(self.algorithm)

		if self.algorithm == "ssh-rsa":
			w.write_mpint(key.e)
			w.write_mpint(key.n)

		elif self.algorithm == "ssh-dss":
			w.write_mpint(key.p)
			w.write_mpint(key.q)
			w.write_mpint(key.g)
			w.write_mpint(key.y)

		elif self.algorithm.startswith("ecdsa-sha2-"):
			_, identifier, _ = ECDSA_CURVES[key.curve]
			point = key.pointQ
			size = point.size_in_bytes()
			q = b"\x04" + int(point.x).to_bytes(size, "big") + int(point.y).to_bytes(size, "big")
			w.write_string(identifier)
			w.write_string(q)

		else:
			# EdDSA. The OpenSSH encoding of the public key is the blob.
			openssh = key.export_key(format="OpenSSH")
			if isinstance(openssh, bytes):
				openssh = openssh.decode("ascii")
			return base64.b64decode(openssh.split()[1])

		return w.data


	def sign(self, data, algorithm=None):
		"""
		Sign data and return the SSH signature blob:

			string	signature format identifier
			string	signature blob
		"""
		if algorithm is None:
			algorithm = self.algorithm
		if algorithm not in self.signature_algorithms:
			raise ValueError(f"{self.algorithm} key cannot sign with {algorithm}")

		if algorithm in RSA_SIGNATURES:
			h = RSA_SIGNATURES[algorithm].new(data)
			sig = pkcs1_15.new(self.private_key).sign(h)

		elif algorithm.startswith("ecdsa-sha2-"):
			_, _, hash_module = ECDSA_CURVES[self.private_key.curve]
			h = hash_module.new(data)
			rs = DSS.new(self.private_key, "fips-186-3").sign(h)
			half = len(rs) // 2

			# ecdsa_signature_blob is mpint r, mpint s
			blob = WriteHelper()
			blob.write_mpint(int.from_bytes(rs[:half], "big"))
			blob.write_mpint(int.from_bytes(rs[half:], "big"))
			sig = blob.data

		else:
			sig = eddsa.new(self.private_key, "rfc8032").sign(data)

		w = WriteHelper()
		w.write_string(algorithm)
		w.write_string(sig)
		return w.data
