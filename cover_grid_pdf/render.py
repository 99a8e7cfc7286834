"""
Rendering and page assembly logic.
"""

# Standard Library
import io
import json
import pathlib
import typing

# PIP3 modules
import PIL.Image
import reportlab.lib.utils
import reportlab.pdfbase.pdfmetrics
import reportlab.pdfgen.canvas
import requests

# local repo modules
import cover_grid_pdf as cgp
import cover_grid_pdf.acquire
import cover_grid_pdf.config
import cover_grid_pdf.errors
import cover_grid_pdf.layout
import cover_grid_pdf.text


CoverSheetConfig = cgp.config.CoverSheetConfig
GridSpec = cgp.config.GridSpec
SheetResult = cgp.config.SheetResult
CellGeometry = cgp.layout.CellGeometry
FitRectangle = cgp.layout.FitRectangle
FetchResult = cgp.acquire.FetchResult
OutputWriteError = cgp.errors.OutputWriteError

STATUS_FOUND = cgp.acquire.STATUS_FOUND
STATUS_NOT_FOUND = cgp.acquire.STATUS_NOT_FOUND
STATUS_INVALID_FORMAT = cgp.acquire.STATUS_INVALID_FORMAT
NOT_FOUND_TEXT = cgp.config.NOT_FOUND_TEXT
INVALID_FORMAT_TEXT = cgp.config.INVALID_FORMAT_TEXT


#============================================
def print_item_progress(current: int, total: int, identifier: str) -> None:
	"""
	Print a per-item download line.

	Args:
		current: One-based item number.
		total: Total item count.
		identifier: Product code.
	"""
	print(f"[{current:02d}/{total:02d}] Downloading ID: {identifier}")


#============================================
def draw_cell_border(
	pdf: reportlab.pdfgen.canvas.Canvas,
	cell: CellGeometry,
	config: CoverSheetConfig,
) -> None:
	"""
	Draw the gray border rectangle inset from the cell edges.

	Args:
		pdf: ReportLab canvas.
		cell: Cell geometry.
		config: Cover sheet configuration.
	"""
	border = cgp.layout.border_rect(cell, config.border_inset)
	gray = config.border_gray / 255.0
	pdf.setLineWidth(config.border_width)
	pdf.setStrokeColorRGB(gray, gray, gray)
	bottom = cgp.layout.to_pdf_y(config.page_height, border.y, border.height)
	pdf.rect(border.x, bottom, border.width, border.height, stroke=1, fill=0)
	pdf.setStrokeColorRGB(0.0, 0.0, 0.0)


#============================================
def draw_text_in_box(
	pdf: reportlab.pdfgen.canvas.Canvas,
	x: float,
	y: float,
	width: float,
	height: float,
	text: str,
	font_name: str,
	font_size: float,
	config: CoverSheetConfig,
) -> None:
	"""
	Draw one line of ASCII text centered in a top-down box.

	Args:
		pdf: ReportLab canvas.
		x: Box left edge.
		y: Box top edge in top-down space.
		width: Box width.
		height: Box height.
		text: Text to draw; transliterated to ASCII first.
		font_name: ReportLab font name.
		font_size: Font size in points.
		config: Cover sheet configuration.
	"""
	safe_text = cgp.text.to_ascii(text)
	ascent = reportlab.pdfbase.pdfmetrics.getAscent(font_name) * font_size / 1000.0
	descent = reportlab.pdfbase.pdfmetrics.getDescent(font_name) * font_size / 1000.0
	baseline = y + height / 2.0 + (ascent + descent) / 2.0
	pdf.setFillColorRGB(0.0, 0.0, 0.0)
	pdf.setFont(font_name, font_size)
	pdf.drawCentredString(x + width / 2.0, config.page_height - baseline, safe_text)


#============================================
def draw_placeholder(
	pdf: reportlab.pdfgen.canvas.Canvas,
	cell: CellGeometry,
	text: str,
	config: CoverSheetConfig,
) -> None:
	"""
	Draw a bold placeholder label near the middle of the cell.
	"""
	box_y = cell.y + cell.height / 2.0 - config.line_height / 2.0
	draw_text_in_box(
		pdf,
		cell.x,
		box_y,
		cell.width,
		config.line_height,
		text,
		config.font_bold,
		config.text_size,
		config,
	)


#============================================
def draw_identifier_caption(
	pdf: reportlab.pdfgen.canvas.Canvas,
	cell: CellGeometry,
	identifier: str,
	config: CoverSheetConfig,
) -> None:
	"""
	Draw the product code near the bottom edge of the cell.
	"""
	box_y = cell.y + cell.height - config.content_padding
	draw_text_in_box(
		pdf,
		cell.x,
		box_y,
		cell.width,
		config.line_height,
		identifier,
		config.font_regular,
		config.text_size,
		config,
	)


#============================================
def load_image_reader(data: bytes) -> reportlab.lib.utils.ImageReader:
	"""
	Fully decode image bytes and wrap them for ReportLab.

	Args:
		data: Image bytes.

	Returns:
		ImageReader instance.
	"""
	image = PIL.Image.open(io.BytesIO(data))
	image.load()
	return reportlab.lib.utils.ImageReader(image)


#============================================
def draw_cover_image(
	pdf: reportlab.pdfgen.canvas.Canvas,
	image_reader: reportlab.lib.utils.ImageReader,
	fit: FitRectangle,
	config: CoverSheetConfig,
) -> None:
	"""
	Place an image at its fit rectangle.

	Args:
		pdf: ReportLab canvas.
		image_reader: ImageReader instance.
		fit: Fit rectangle in top-down space.
		config: Cover sheet configuration.
	"""
	pdf.drawImage(
		image_reader,
		fit.x,
		cgp.layout.to_pdf_y(config.page_height, fit.y, fit.height),
		width=fit.width,
		height=fit.height,
		mask="auto",
		preserveAspectRatio=False,
		anchor="sw",
	)


#============================================
def draw_item(
	pdf: reportlab.pdfgen.canvas.Canvas,
	cell: CellGeometry,
	fetch_result: FetchResult,
	config: CoverSheetConfig,
) -> str:
	"""
	Draw one cell: border plus image or placeholder.

	Args:
		pdf: ReportLab canvas.
		cell: Cell geometry.
		fetch_result: Download outcome for the item.
		config: Cover sheet configuration.

	Returns:
		Final status for the item.
	"""
	draw_cell_border(pdf, cell, config)

	if fetch_result.status == STATUS_NOT_FOUND:
		draw_placeholder(pdf, cell, NOT_FOUND_TEXT, config)
		draw_identifier_caption(pdf, cell, fetch_result.identifier, config)
		return STATUS_NOT_FOUND

	if fetch_result.status != STATUS_FOUND or fetch_result.image_size is None:
		draw_placeholder(pdf, cell, INVALID_FORMAT_TEXT, config)
		return STATUS_INVALID_FORMAT

	try:
		image_reader = load_image_reader(fetch_result.data)
	except (OSError, SyntaxError, ValueError):
		# header was readable but pixel data is not
		draw_placeholder(pdf, cell, INVALID_FORMAT_TEXT, config)
		return STATUS_INVALID_FORMAT

	image_width, image_height = fetch_result.image_size
	fit = cgp.layout.compute_fit_rectangle(cell, image_width, image_height, config.content_padding)
	draw_cover_image(pdf, image_reader, fit, config)
	return STATUS_FOUND


#============================================
def draw_cover_sheet(
	pdf: reportlab.pdfgen.canvas.Canvas,
	identifiers: list[str],
	fetch_results: typing.Iterable[FetchResult],
	grid: GridSpec,
	config: CoverSheetConfig,
) -> SheetResult:
	"""
	Draw every item onto the canvas, starting pages as the grid wraps.

	Args:
		pdf: ReportLab canvas positioned on its first page.
		identifiers: Product codes in input order.
		fetch_results: Fetch results in the same order as identifiers.
		grid: Grid rows and columns.
		config: Cover sheet configuration.

	Returns:
		SheetResult.
	"""
	total = len(identifiers)
	result = SheetResult(
		total_items=total,
		pages=cgp.layout.page_count(total, grid),
		cells_per_page=grid.cells_per_page,
	)
	results_iter = iter(fetch_results)
	for index, identifier in enumerate(identifiers):
		if cgp.layout.needs_new_page(index, grid):
			pdf.showPage()
		cell = cgp.layout.compute_cell_geometry(index, grid, config)
		if config.verbose:
			print_item_progress(index + 1, total, identifier)
		fetch_result = next(results_iter)
		status = draw_item(pdf, cell, fetch_result, config)
		if status == STATUS_FOUND:
			result.found += 1
		elif status == STATUS_NOT_FOUND:
			result.not_found += 1
		else:
			result.invalid_format += 1
		result.items.append(
			{
				"index": index,
				"identifier": identifier,
				"status": status,
				"url": fetch_result.url,
				"format": fetch_result.format_tag,
				"attempts": fetch_result.attempts,
				"page": cell.page_index,
				"row": cell.row,
				"column": cell.column,
			}
		)
	return result


#============================================
def render_cover_sheet(
	identifiers: list[str],
	output_path: pathlib.Path,
	grid: GridSpec,
	config: CoverSheetConfig,
	session: requests.Session | None = None,
) -> SheetResult:
	"""
	Download covers and write the grid PDF.

	Args:
		identifiers: Product codes in input order.
		output_path: Output PDF path.
		grid: Grid rows and columns.
		config: Cover sheet configuration.
		session: Optional HTTP session; one is built when omitted.

	Returns:
		SheetResult.
	"""
	if session is None:
		session = cgp.acquire.build_session(config)
	pdf = reportlab.pdfgen.canvas.Canvas(
		str(output_path),
		pagesize=(config.page_width, config.page_height),
	)
	fetch_results = cgp.acquire.iter_fetch_results(session, identifiers, config)
	result = draw_cover_sheet(pdf, identifiers, fetch_results, grid, config)
	try:
		pdf.save()
	except OSError as error:
		raise OutputWriteError(f"failed to save PDF: {error}", {"path": str(output_path)}) from error
	return result


#============================================
def write_manifest(
	manifest_path: pathlib.Path,
	result: SheetResult,
	grid: GridSpec,
	config: CoverSheetConfig,
) -> None:
	"""
	Write a manifest JSON file describing the run.

	Args:
		manifest_path: Output path.
		result: Sheet result.
		grid: Grid rows and columns.
		config: Cover sheet configuration.
	"""
	data = {
		"total_items": result.total_items,
		"pages": result.pages,
		"cells_per_page": result.cells_per_page,
		"found": result.found,
		"not_found": result.not_found,
		"invalid_format": result.invalid_format,
		"items": result.items,
		"layout": {
			"rows": grid.rows,
			"columns": grid.columns,
			"page_width": config.page_width,
			"page_height": config.page_height,
			"margin_x": config.margin_x,
			"margin_y": config.margin_y,
			"border_inset": config.border_inset,
			"content_padding": config.content_padding,
		},
		"sources": {
			"primary_url_template": config.primary_url_template,
			"backup_url_template": config.backup_url_template,
		},
	}
	try:
		with manifest_path.open("w", encoding="utf-8") as handle:
			json.dump(data, handle, indent=2, sort_keys=True)
	except OSError as error:
		raise OutputWriteError(f"failed to write manifest: {error}", {"path": str(manifest_path)}) from error
