"""
ASCII transliteration for PDF base fonts.
"""

# Standard Library
import unicodedata


TRANSLITERATION = {
	"ğ": "g",
	"Ğ": "G",
	"ü": "u",
	"Ü": "U",
	"ş": "s",
	"Ş": "S",
	"ı": "i",
	"İ": "I",
	"ö": "o",
	"Ö": "O",
	"ç": "c",
	"Ç": "C",
}


#============================================
def to_ascii(value: str) -> str:
	"""
	Map text to ASCII so the standard PDF fonts can render it.

	Turkish letters use a fixed table. Any other accented letter is
	decomposed and its marks dropped.

	Args:
		value: Input text.

	Returns:
		ASCII-only text.
	"""
	if not value:
		return value
	for source, target in TRANSLITERATION.items():
		value = value.replace(source, target)
	value = unicodedata.normalize("NFKD", value)
	value = value.encode("ascii", "ignore").decode("ascii")
	return value
