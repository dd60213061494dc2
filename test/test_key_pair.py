import base64
import os
import unittest
from Crypto.Hash import SHA1, SHA256, SHA512
from Crypto.PublicKey import ECC, RSA
from Crypto.Signature import DSS, eddsa, pkcs1_15

from file_key_pair_provider import FileKeyPairProvider
from helpers import ReadHelper
from key_pair import KeyPair, key_algorithm


KEYS_DIR = os.path.join(os.path.dirname(os.path.abspath(__file__)), "keys")


def load(name):
	return FileKeyPairProvider().load_key(os.path.join(KEYS_DIR, name))

def public_blob(name):
	with open(os.path.join(KEYS_DIR, name + ".pub")) as f:
		return base64.b64decode(f.read().split()[1])

def split_signature(sig):
	r = ReadHelper(sig)
	algorithm = r.read_string(ascii=True)
	blob = r.read_string()
	return algorithm, blob



class TestKeyBlob(unittest.TestCase):

	def test_blobs_match_ssh_keygen(self):
		keys = [
			("rsa_pkcs1.pem", "rsa_pkcs1"),
			("dsa_pkcs8.pem", "dsa_pkcs8"),
			("ecdsa_p256.pem", "ecdsa_p256"),
			("ecdsa_p384_pkcs8.pem", "ecdsa_p384_pkcs8"),
			("ed25519_openssh.pem", "ed25519_openssh"),
		]
		for filename, pub in keys:
			with self.subTest(filename=filename):
				key_pair = load(filename)

				self.assertEqual(key_pair.key_blob, public_blob(pub))

	def test_fingerprints_match_ssh_keygen(self):
		keys = [
			("rsa_pkcs1.pem", "SHA256:mRW7kdYC44DyCIQ9TVYVrekY+wjBalchZoOLlsJ7BU8"),
			("dsa_pkcs8.pem", "SHA256:nK1u9x3gQcz0WFLugChmr5uIwi3Qe6t32kNlcTCXRT8"),
			("ecdsa_p256.pem", "SHA256:5RIk+BY1rQjl8U7noZP+Qcp2SYsVOanWKzD5vqzOrqg"),
			("ecdsa_p384_pkcs8.pem", "SHA256:1NWZXMxSU7iIC6GAFQX4AdxkGIjZ4o3xEzgfsUnHclY"),
			("ed25519_openssh.pem", "SHA256:Ph1Hoa6OtJlqKDF/arjcDmGhUbGAnUgZhcyZFMT0qPY"),
		]
		for filename, expected in keys:
			with self.subTest(filename=filename):
				self.assertEqual(load(filename).fingerprint, expected)

	def test_same_key_in_different_formats_is_equal(self):
		self.assertEqual(load("rsa_pkcs1.pem"), load("rsa_pkcs8.pem"))
		self.assertNotEqual(load("rsa_pkcs1.pem"), load("ecdsa_p256.pem"))

	def test_generated_key(self):
		key = ECC.generate(curve="P-521")

		key_pair = KeyPair(key)

		self.assertEqual(key_pair.algorithm, "ecdsa-sha2-nistp521")
		self.assertIsNone(key_pair.source)
		r = ReadHelper(key_pair.key_blob)
		self.assertEqual(r.read_string(ascii=True), "ecdsa-sha2-nistp521")
		self.assertEqual(r.read_string(ascii=True), "nistp521")
		self.assertEqual(len(r.read_string()), 1 + 2 * 66)
		self.assertEqual(r.remaining, 0)


class TestKeyAlgorithm(unittest.TestCase):

	def test_public_key_is_rejected(self):
		key = load("rsa_pkcs1.pem").public_key

		with self.assertRaises(ValueError):
			KeyPair(key)

	def test_unknown_curve(self):
		key = ECC.generate(curve="Ed448")

		with self.assertRaises(ValueError):
			key_algorithm(key)



class TestSign(unittest.TestCase):

	data = b"exchange hash"

	def test_sign_ssh_rsa(self):
		key_pair = load("rsa_pkcs1.pem")

		algorithm, sig = split_signature(key_pair.sign(self.data))

		self.assertEqual(algorithm, "ssh-rsa")
		pkcs1_15.new(key_pair.public_key).verify(SHA1.new(self.data), sig)

	def test_sign_rsa_sha2(self):
		key_pair = load("rsa_pkcs1.pem")
		for name, hash_module in [("rsa-sha2-256", SHA256), ("rsa-sha2-512", SHA512)]:
			with self.subTest(algorithm=name):
				algorithm, sig = split_signature(key_pair.sign(self.data, name))

				self.assertEqual(algorithm, name)
				pkcs1_15.new(key_pair.public_key).verify(hash_module.new(self.data), sig)

	def test_sign_ecdsa(self):
		key_pair = load("ecdsa_p256.pem")

		algorithm, sig = split_signature(key_pair.sign(self.data))

		self.assertEqual(algorithm, "ecdsa-sha2-nistp256")
		r = ReadHelper(sig)
		rs = r.read_mpint().to_bytes(32, "big") + r.read_mpint().to_bytes(32, "big")
		DSS.new(key_pair.public_key, "fips-186-3").verify(SHA256.new(self.data), rs)

	def test_sign_ed25519(self):
		key_pair = load("ed25519_openssh.pem")

		algorithm, sig = split_signature(key_pair.sign(self.data))

		self.assertEqual(algorithm, "ssh-ed25519")
		eddsa.new(key_pair.public_key, "rfc8032").verify(self.data, sig)

	def test_dsa_cannot_sign(self):
		key_pair = load("dsa_pkcs8.pem")

		self.assertEqual(key_pair.signature_algorithms, [])
		with self.assertRaises(ValueError):
			key_pair.sign(self.data)

	def test_wrong_algorithm_for_key(self):
		key_pair = load("ecdsa_p256.pem")

		with self.assertRaises(ValueError):
			key_pair.sign(self.data, "ssh-rsa")

	def test_generated_rsa_key(self):
		key_pair = KeyPair(RSA.generate(1024))

		algorithm, sig = split_signature(key_pair.sign(self.data, "rsa-sha2-256"))

		self.assertEqual(algorithm, "rsa-sha2-256")
		self.assertEqual(len(sig), 128)
