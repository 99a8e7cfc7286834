"""
Grid and pagination geometry.

All rectangles use top-down page space: the origin is the top-left page
corner and y grows downward. Use to_pdf_y() before drawing on a ReportLab
canvas.
"""

# Standard Library
import dataclasses

# local repo modules
import cover_grid_pdf as cgp
import cover_grid_pdf.config


GridSpec = cgp.config.GridSpec
CoverSheetConfig = cgp.config.CoverSheetConfig


@dataclasses.dataclass(frozen=True)
class Rect:
	x: float
	y: float
	width: float
	height: float


@dataclasses.dataclass(frozen=True)
class CellGeometry:
	index: int
	page_index: int
	local_index: int
	row: int
	column: int
	x: float
	y: float
	width: float
	height: float


@dataclasses.dataclass(frozen=True)
class FitRectangle:
	x: float
	y: float
	width: float
	height: float


#============================================
def content_area(config: CoverSheetConfig) -> tuple[float, float]:
	"""
	Compute the page area left after subtracting margins on both sides.

	Args:
		config: Cover sheet configuration.

	Returns:
		Tuple of (width, height).
	"""
	width = config.page_width - 2.0 * config.margin_x
	height = config.page_height - 2.0 * config.margin_y
	return (width, height)


#============================================
def cell_size(grid: GridSpec, config: CoverSheetConfig) -> tuple[float, float]:
	"""
	Compute the uniform cell size for a grid.

	Args:
		grid: Grid rows and columns.
		config: Cover sheet configuration.

	Returns:
		Tuple of (cell_width, cell_height).
	"""
	width, height = content_area(config)
	return (width / grid.columns, height / grid.rows)


#============================================
def page_count(total: int, grid: GridSpec) -> int:
	"""
	Number of pages needed for a number of items.
	"""
	if total <= 0:
		return 0
	return (total + grid.cells_per_page - 1) // grid.cells_per_page


#============================================
def needs_new_page(index: int, grid: GridSpec) -> bool:
	"""
	True when the item at index starts a new page.
	"""
	return index > 0 and index % grid.cells_per_page == 0


#============================================
def compute_cell_geometry(index: int, grid: GridSpec, config: CoverSheetConfig) -> CellGeometry:
	"""
	Compute page, row, column and cell rectangle for an item.

	Cells fill rows left to right, then move down.

	Args:
		index: Zero-based item index.
		grid: Grid rows and columns.
		config: Cover sheet configuration.

	Returns:
		CellGeometry.
	"""
	if index < 0:
		raise ValueError(f"item index must be non-negative, got {index}")
	cells_per_page = grid.cells_per_page
	page_index = index // cells_per_page
	local_index = index % cells_per_page
	row = local_index // grid.columns
	column = local_index % grid.columns
	cell_width, cell_height = cell_size(grid, config)
	return CellGeometry(
		index=index,
		page_index=page_index,
		local_index=local_index,
		row=row,
		column=column,
		x=config.margin_x + column * cell_width,
		y=config.margin_y + row * cell_height,
		width=cell_width,
		height=cell_height,
	)


#============================================
def border_rect(cell: CellGeometry, inset: float) -> Rect:
	"""
	Shrink the cell rectangle by inset on every side.
	"""
	return Rect(
		cell.x + inset,
		cell.y + inset,
		cell.width - 2.0 * inset,
		cell.height - 2.0 * inset,
	)


#============================================
def compute_fit_rectangle(
	cell: CellGeometry,
	image_width: int,
	image_height: int,
	padding: float,
) -> FitRectangle:
	"""
	Fit an image inside the padded cell without distorting it.

	Width is tried first; when the resulting height is too tall the height is
	clamped and the width follows from the aspect ratio. The result is
	centered in the cell.

	Args:
		cell: Cell geometry.
		image_width: Image width in pixels.
		image_height: Image height in pixels.
		padding: Total padding subtracted from each cell dimension.

	Returns:
		FitRectangle.
	"""
	if image_width <= 0 or image_height <= 0:
		raise ValueError(f"image size must be positive, got {image_width}x{image_height}")
	aspect = image_height / image_width
	display_width = cell.width - padding
	display_height = display_width * aspect
	if display_height > cell.height - padding:
		display_height = cell.height - padding
		display_width = display_height / aspect
	return FitRectangle(
		x=cell.x + (cell.width - display_width) / 2.0,
		y=cell.y + (cell.height - display_height) / 2.0,
		width=display_width,
		height=display_height,
	)


#============================================
def to_pdf_y(page_height: float, y: float, height: float) -> float:
	"""
	Convert a top-down y to ReportLab's bottom-up y for a box.

	Args:
		page_height: Page height.
		y: Top edge in top-down space.
		height: Box height.

	Returns:
		Bottom edge in ReportLab space.
	"""
	return page_height - y - height
