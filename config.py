class Config:
	# Our host private key files. Order matters, the first key that can
	#  serve a negotiated algorithm is the one used.
	HOST_KEYS = [
		"ssh_host_ed25519_key",
		"ssh_host_ecdsa_key",
		"ssh_host_rsa_key",
	]

	# Passphrase for encrypted host keys. None means encrypted keys are
	#  skipped when loading.
	HOST_KEY_PASSPHRASE = None

	# Name of the registered cryptographic provider used to parse keys
	KEY_PROVIDER = "pycryptodome"
