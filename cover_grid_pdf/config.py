"""
Shared configuration and constants.
"""

# Standard Library
import dataclasses

# PIP3 modules
import reportlab.lib.pagesizes

# local repo modules
import cover_grid_pdf as cgp
import cover_grid_pdf.errors


ConfigurationError = cgp.errors.ConfigurationError

POINTS_PER_INCH = 72.0
MM_PER_INCH = 25.4

DEFAULT_GRID_SIZE = "3x6"
DEFAULT_OUTPUT_NAME = "output.pdf"
OUTPUT_SUFFIX = ".pdf"

PRIMARY_URL_TEMPLATE = "https://i.dr.com.tr/cache/500x400-0/originals/{identifier}-1.jpg"
BACKUP_URL_TEMPLATE = "https://i.dr.com.tr/cache/500x400-0/originals/{identifier}.jpg"
HTTP_USER_AGENT = "Mozilla/5.0 (Windows NT 10.0; Win64; x64)"
HTTP_TIMEOUT = 15.0
DEFAULT_FETCH_WORKERS = 1

PRODUCT_CODE_MARKER = "urunno="
COMMENT_MARKER = "#"

# millimeters, converted to points in CoverSheetConfig defaults
PAGE_MARGIN_X_MM = 20.0
PAGE_MARGIN_Y_MM = 20.0
CELL_BORDER_INSET_MM = 2.0
CONTENT_PADDING_MM = 10.0

CELL_BORDER_WIDTH = 0.3
CELL_BORDER_GRAY = 160

DEFAULT_FONT_REGULAR = "Helvetica"
DEFAULT_FONT_BOLD = "Helvetica-Bold"
PLACEHOLDER_TEXT_SIZE = 8.0
PLACEHOLDER_LINE_HEIGHT_MM = 5.0
NOT_FOUND_TEXT = "NOT FOUND"
INVALID_FORMAT_TEXT = "INVALID FORMAT"


#============================================
def mm_to_points(value: float) -> float:
	"""
	Convert millimeters to points.

	Args:
		value: Millimeter value.

	Returns:
		Points value.
	"""
	return value * POINTS_PER_INCH / MM_PER_INCH


PAGE_WIDTH, PAGE_HEIGHT = reportlab.lib.pagesizes.landscape(reportlab.lib.pagesizes.A4)


@dataclasses.dataclass(frozen=True)
class GridSpec:
	rows: int
	columns: int

	@property
	def cells_per_page(self) -> int:
		return self.rows * self.columns


@dataclasses.dataclass
class CoverSheetConfig:
	primary_url_template: str = PRIMARY_URL_TEMPLATE
	backup_url_template: str = BACKUP_URL_TEMPLATE
	user_agent: str = HTTP_USER_AGENT
	http_timeout: float = HTTP_TIMEOUT
	fetch_workers: int = DEFAULT_FETCH_WORKERS
	page_width: float = PAGE_WIDTH
	page_height: float = PAGE_HEIGHT
	margin_x: float = mm_to_points(PAGE_MARGIN_X_MM)
	margin_y: float = mm_to_points(PAGE_MARGIN_Y_MM)
	border_inset: float = mm_to_points(CELL_BORDER_INSET_MM)
	content_padding: float = mm_to_points(CONTENT_PADDING_MM)
	border_width: float = CELL_BORDER_WIDTH
	border_gray: int = CELL_BORDER_GRAY
	font_regular: str = DEFAULT_FONT_REGULAR
	font_bold: str = DEFAULT_FONT_BOLD
	text_size: float = PLACEHOLDER_TEXT_SIZE
	line_height: float = mm_to_points(PLACEHOLDER_LINE_HEIGHT_MM)
	verbose: bool = True


@dataclasses.dataclass
class SheetResult:
	total_items: int
	pages: int
	cells_per_page: int
	found: int = 0
	not_found: int = 0
	invalid_format: int = 0
	items: list[dict] = dataclasses.field(default_factory=list)


#============================================
def parse_grid_size(value: str) -> GridSpec:
	"""
	Parse a grid size string like "3x6" into rows and columns.

	Args:
		value: Grid size as "<rows>x<cols>".

	Returns:
		GridSpec.
	"""
	clean = (value or "").strip().lower()
	parts = clean.split("x")
	if len(parts) != 2:
		raise ConfigurationError("grid size must be rowxcol", {"value": value})
	rows = parse_grid_count(parts[0])
	if rows <= 0:
		raise ConfigurationError("row value must be positive", {"value": value})
	columns = parse_grid_count(parts[1])
	if columns <= 0:
		raise ConfigurationError("column value must be positive", {"value": value})
	return GridSpec(rows=rows, columns=columns)


#============================================
def parse_grid_count(value: str) -> int:
	"""
	Parse a plain ASCII decimal count, returning 0 for anything else.
	"""
	if not value.isascii() or not value.isdigit():
		return 0
	return int(value)
