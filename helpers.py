import struct


class ReadHelper:
	def __init__(self, data):
		self.data = data
		self.head = 0

	@property
	def remaining(self):
		return len(self.data) - self.head

	def read_bytes(self, n):
		if n > self.remaining:
			raise ValueError(f"Wanted {n} bytes but only {self.remaining} remain")
		b = self.data[self.head:self.head+n]
		self.head += n
		return b

	def read_uint32(self):
		b = self.read_bytes(4)
		return struct.unpack(">I", b)[0]

	def read_string(self, ascii=False):
		"""
		uint32 length followed by that many bytes. Text is US-ASCII for
		names like key formats and cipher names.
		"""
		str_len = self.read_uint32()
		str_b = self.read_bytes(str_len)

		if ascii:
			return str_b.decode("utf-8")
		return str_b

	def read_mpint(self):
		"""
		Two's complement integer stored as a string, MSB first. Zero is
		the empty string.
		"""
		mpint_len = self.read_uint32()
		if mpint_len == 0:
			return 0

		num_b = self.read_bytes(mpint_len)
		return int.from_bytes(num_b, "big", signed=True)



class WriteHelper:
	def __init__(self):
		self.data = b""

	def write_bytes(self, data):
		self.data += data

	def write_uint32(self, num):
		b = struct.pack(">I", num)
		self.write_bytes(b)

	def write_string(self, data):
		"""
		Length prefixed binary string. str values are UTF-8 encoded first.
		"""
		if isinstance(data, str):
			str_b = data.encode("utf-8")
		else:
			str_b = data

		self.write_uint32(len(str_b))
		self.write_bytes(str_b)

	def write_mpint(self, num):
		"""
		Multiple precision integer. A positive number whose top bit is set
		gets a leading zero byte, and zero is written as a zero length
		string.

			value (hex)			representation (hex)
			-----------			--------------------
			0					00 00 00 00
			80					00 00 00 02 00 80
			-1234				00 00 00 02 ed cc
		"""
		if num == 0:
			self.write_uint32(0)
			return

		mpint_len = (~num if num < 0 else num).bit_length() // 8 + 1
		num_b = num.to_bytes(mpint_len, "big", signed=True)
		self.write_uint32(mpint_len)
		self.write_bytes(num_b)



class GenericHandler:
	@property
	def available_algorithms(self):
		alg_and_prio = [
			(a, self.algorithms[a]["priority"])
			for a in self.algorithms
			if self.algorithms[a]["available"]]

		alg_and_prio.sort(key=lambda x:x[1], reverse=True)
		return [a for a,p in alg_and_prio]
