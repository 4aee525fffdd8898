"""
OpenKore shop config serialization.

WHAT: Render offers into control/shop.txt and read them back
WHY: The bot only learns about new offers through this file
HOW: Plain text: shop name, blank line, one `name<TAB>price<TAB>count` per entry
"""

import os
import stat
import tempfile
from pathlib import Path

from ..models.offer import Offer, ShopEntry
from ..utils.exceptions import PersistenceError, ShopConfigFormatError, ShopConfigNotFoundError
from ..utils.logger import get_logger

logger = get_logger(__name__)

DEFAULT_MODE = 0o644


def render_shop_config(shop_name: str, offer: Offer) -> str:
    """
    Render an offer in the bot's shop config format.
    
    Example:
        render_shop_config("MyShop", offer)  # "MyShop\\n\\nPotion\\t50\\t3\\n"
    """
    lines = [shop_name, ""]
    for entry in offer.entries:
        lines.append(f"{entry.name}\t{entry.formatted_price}\t{entry.count}")
    return "\n".join(lines) + "\n"


def parse_shop_config(text: str) -> tuple[str, list[ShopEntry]]:
    """
    Parse shop config text back into the shop name and entries.
    
    Raises:
        ShopConfigFormatError: an entry line is not `name<TAB>price<TAB>count`
    """
    lines = text.splitlines()
    if not lines:
        return "", []
    
    shop_name = lines[0]
    entries = []
    for line_number, line in enumerate(lines[1:], start=2):
        if not line.strip():
            continue
        parts = line.split("\t")
        if len(parts) != 3 or not parts[0]:
            raise ShopConfigFormatError(line, line_number)
        name, price, count = parts
        if not (price.isascii() and price.isdigit() and count.isascii() and count.isdigit()):
            raise ShopConfigFormatError(line, line_number)
        entries.append(ShopEntry(name=name, price=int(price), count=int(count)))
    return shop_name, entries


def _target_mode(target: Path) -> int:
    try:
        return stat.S_IMODE(target.stat().st_mode)
    except FileNotFoundError:
        return DEFAULT_MODE


def write_shop_config(path: str | Path, shop_name: str, offer: Offer) -> Path:
    """
    Write the rendered offer to `path`, replacing the file atomically.
    
    Raises:
        PersistenceError: the file cannot be written
    """
    target = Path(path)
    content = render_shop_config(shop_name, offer)
    logger.info(f"Writing openkore shop config to {target}")
    
    tmp_name = None
    try:
        target.parent.mkdir(parents=True, exist_ok=True)
        fd, tmp_name = tempfile.mkstemp(dir=target.parent, prefix=".shop-", suffix=".tmp")
        # newline="" keeps "\n" line endings on every platform
        with os.fdopen(fd, "w", encoding="utf-8", newline="") as f:
            f.write(content)
        # mkstemp creates files as 0600
        os.chmod(tmp_name, _target_mode(target))
        os.replace(tmp_name, target)
    except OSError as e:
        if tmp_name is not None and os.path.exists(tmp_name):
            os.unlink(tmp_name)
        raise PersistenceError(str(target), str(e)) from e
    
    return target


def read_shop_config(path: str | Path) -> str:
    """
    Read the shop config currently on disk.
    
    Raises:
        ShopConfigNotFoundError: nothing has been confirmed yet
        PersistenceError: the file cannot be read
    """
    target = Path(path)
    try:
        return target.read_text(encoding="utf-8")
    except FileNotFoundError as e:
        raise ShopConfigNotFoundError(str(target)) from e
    except OSError as e:
        raise PersistenceError(str(target), str(e)) from e
