"""
Printable gate tag: entry details around a Code128 barcode of the gate entry number.
Rendered locally with Pillow and python-barcode.
"""
import io
import base64
import logging
from PIL import Image, ImageDraw, ImageFont
import barcode
from barcode.writer import ImageWriter

logger = logging.getLogger(__name__)


def _load_fonts():
    try:
        return (
            ImageFont.truetype('/usr/share/fonts/truetype/dejavu/DejaVuSans-Bold.ttf', 18),
            ImageFont.truetype('/usr/share/fonts/truetype/dejavu/DejaVuSans.ttf', 14),
        )
    except (OSError, IOError):
        try:
            return ImageFont.truetype('arial.ttf', 18), ImageFont.truetype('arial.ttf', 14)
        except (OSError, IOError):
            return ImageFont.load_default(), ImageFont.load_default()


def _centered(draw, y, text, font, width):
    bbox = draw.textbbox((0, 0), text, font=font)
    draw.text(((width - (bbox[2] - bbox[0])) // 2, y), text, fill='black', font=font)


def tag_lines(entry):
    """Text printed on the tag for a gate entry"""
    direction = 'GOODS IN' if entry.direction == 'IN' else 'GOODS OUT'
    lines = [f"{direction} - {entry.get_material_type_display()}"]
    party = entry.supplier_name or (entry.partner.name if entry.partner else '') or \
        (entry.customer.customer_name if entry.customer else '')
    if party:
        lines.append(party[:36])
    details = []
    if entry.heat_no:
        details.append(f"Heat {entry.heat_no}")
    if entry.material_grade:
        details.append(entry.material_grade)
    if entry.work_order:
        details.append(entry.work_order.wo_number)
    if details:
        lines.append('  '.join(details))
    weight = f"Net {entry.net_weight_kg} kg"
    if entry.estimated_pcs:
        weight += f"  ~{entry.estimated_pcs} pcs"
    lines.append(weight)
    return lines


def generate_gate_tag(entry, width=500, height=300):
    """
    Render the tag as a base64 PNG data URL.
    If the barcode cannot be drawn the entry number is printed as text instead.
    """
    img = Image.new('RGB', (width, height), color='white')
    draw = ImageDraw.Draw(img)
    font_large, font_medium = _load_fonts()
    margin = 10

    _centered(draw, 8, entry.gate_entry_no, font_large, width)
    barcode_y = 34
    barcode_height = 90

    try:
        code128 = barcode.get_barcode_class('code128')
        barcode_img = code128(entry.gate_entry_no, writer=ImageWriter()).render({
            'write_text': False,
            'module_width': 0.3,
            'module_height': 15.0,
            'quiet_zone': 2.0,
            'background': 'white',
            'foreground': 'black',
        })
        barcode_width = min(width - 2 * margin, barcode_img.size[0])
        barcode_img = barcode_img.resize((barcode_width, barcode_height), Image.Resampling.BILINEAR)
        img.paste(barcode_img, ((width - barcode_width) // 2, barcode_y))
    except Exception as e:
        logger.warning(f"Barcode render failed for gate entry {entry.gate_entry_no}: {str(e)}")
        _centered(draw, barcode_y, f"BARCODE: {entry.gate_entry_no}", font_medium, width)

    y = barcode_y + barcode_height + 12
    for line in tag_lines(entry):
        _centered(draw, y, line, font_medium, width)
        y += 22

    buffer = io.BytesIO()
    img.save(buffer, format='PNG', optimize=False, compress_level=1)
    image_base64 = base64.b64encode(buffer.getvalue()).decode('utf-8')
    buffer.close()
    img.close()
    return f'data:image/png;base64,{image_base64}'
