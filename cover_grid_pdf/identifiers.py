"""
Product code extraction from raw input lines.
"""

# Standard Library
import typing

# local repo modules
import cover_grid_pdf as cgp
import cover_grid_pdf.config
import cover_grid_pdf.errors


InputReadError = cgp.errors.InputReadError

PRODUCT_CODE_MARKER = cgp.config.PRODUCT_CODE_MARKER
COMMENT_MARKER = cgp.config.COMMENT_MARKER

ASCII_DIGITS = frozenset("0123456789")


#============================================
def is_all_digits(value: str) -> bool:
	"""
	Check that a string is non-empty and made only of 0-9.

	Args:
		value: String to check.

	Returns:
		True when every character is an ASCII digit.
	"""
	if not value:
		return False
	return all(char in ASCII_DIGITS for char in value)


#============================================
def extract_product_code(line: str) -> str:
	"""
	Extract a product code from a bare code or a product-page link.

	Args:
		line: Input line.

	Returns:
		Product code, or an empty string when none is present.
	"""
	line = line.strip()
	if is_all_digits(line):
		return line
	marker_index = line.find(PRODUCT_CODE_MARKER)
	if marker_index == -1:
		return ""
	digits: list[str] = []
	for char in line[marker_index + len(PRODUCT_CODE_MARKER):]:
		if char not in ASCII_DIGITS:
			break
		digits.append(char)
	return "".join(digits)


#============================================
def scan_identifiers(lines: typing.Iterable[str]) -> list[str]:
	"""
	Collect product codes from input lines in order.

	Repeats are kept. Blank lines and comment lines are skipped.

	Args:
		lines: Raw input lines.

	Returns:
		List of product codes.
	"""
	identifiers: list[str] = []
	for raw_line in lines:
		line = raw_line.strip()
		if not line or line.startswith(COMMENT_MARKER):
			continue
		code = extract_product_code(line)
		if code:
			identifiers.append(code)
	return identifiers


#============================================
def read_identifiers(stream: typing.TextIO) -> list[str]:
	"""
	Read product codes from a text stream.

	Args:
		stream: Open text stream.

	Returns:
		List of product codes.
	"""
	try:
		lines = stream.readlines()
	except (OSError, UnicodeDecodeError) as error:
		raise InputReadError(f"unable to read input: {error}") from error
	return scan_identifiers(lines)
