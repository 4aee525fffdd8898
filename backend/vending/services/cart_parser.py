"""
Cart report parsing from the OpenKore console log.

WHAT: Extract the latest cart snapshot from raw console text
WHY: The console log is the only place the bot reports what the cart holds
HOW: Forward scan for the cart banner; every block replaces the previous one

The log is an append-only transcript, so the block after the LAST banner is
the current cart. A console block looks like:

    ---------------------- Cart ----------------------
    #  Name                                       Amount
    0  Red Potion                                 10
    1  Fly Wing                                   200
    <blank line>
"""

from pathlib import Path
from typing import Iterator

from ..models.cart import CartItem, CartSnapshot
from ..utils.exceptions import MalformedCartLineError
from ..utils.logger import get_logger

logger = get_logger(__name__)

CART_BANNER = "---------------------- Cart ----------------------"


def parse_cart_line(line: str, line_number: int = 0) -> CartItem:
    """
    Parse one cart row: `<index> <name tokens...> <count>`.
    
    The leading token is the cart slot index and is discarded.
    
    Raises:
        MalformedCartLineError: count is not a positive integer or name is empty
    """
    tokens = line.split()
    if not tokens:
        raise MalformedCartLineError(line, line_number, "empty line")
    
    raw_count = tokens[-1]
    if not (raw_count.isascii() and raw_count.isdigit()) or int(raw_count) <= 0:
        raise MalformedCartLineError(line, line_number, f"count {raw_count!r} is not a positive integer")
    
    name = " ".join(tokens[1:-1]).strip()
    if not name:
        raise MalformedCartLineError(line, line_number, "item name is empty")
    
    return CartItem(name=name, count=int(raw_count))


def _is_rule(line: str) -> bool:
    stripped = line.strip()
    return bool(stripped) and set(stripped) == {"-"}


def _read_block(lines: Iterator[tuple[int, str]]) -> list[tuple[int, str]]:
    block = []
    for line_number, line in lines:
        if not line.strip():
            break
        block.append((line_number, line))
    return block


def _parse_block(block: list[tuple[int, str]]) -> CartSnapshot:
    items = []
    first = True
    for line_number, line in block:
        if first and line.lstrip().startswith("#"):
            first = False
            continue  # column header
        first = False
        if _is_rule(line):
            continue
        items.append(parse_cart_line(line, line_number))
    return CartSnapshot(items=tuple(items))


def parse_cart_log(log_text: str) -> CartSnapshot | None:
    """
    Return the cart snapshot from the last cart report in the log.
    
    Args:
        log_text: Full console transcript
    
    Returns:
        CartSnapshot, or None when the log has no cart report yet
    
    Raises:
        MalformedCartLineError: a row of the last cart block cannot be parsed
    """
    latest: CartSnapshot | None = None
    pending_error: MalformedCartLineError | None = None
    blocks = 0
    lines = enumerate(log_text.splitlines(), start=1)
    
    for _, line in lines:
        if CART_BANNER in line:
            # The block is read off the shared iterator up to the blank line
            block = _read_block(lines)
            blocks += 1
            try:
                latest = _parse_block(block)
                pending_error = None
            except MalformedCartLineError as e:
                # Only fatal if no later report supersedes this one
                pending_error = e
    
    if pending_error is not None:
        raise pending_error
    
    if latest is None:
        logger.debug("No cart report found in console log")
    else:
        logger.info(f"Parsed {blocks} cart report(s); latest has {len(latest)} item(s)")
    return latest


def read_cart_log(path: str | Path) -> CartSnapshot | None:
    """
    Parse the cart snapshot from a console log file.
    
    A missing file means the bot has not written anything yet and yields None.
    """
    log_path = Path(path)
    try:
        text = log_path.read_text(encoding="utf-8", errors="replace")
    except FileNotFoundError:
        logger.info(f"Console log not found yet: {log_path}")
        return None
    return parse_cart_log(text)
