"""ISS reference page parser.

Parses the HTML served at /iss/reference/<id> into a ReferenceDescriptor.
The page layout is fixed: an <h1> holding the /iss/ path, then a <dl>
whose <dt>/<dd> pairs describe the blocks, each <dd> nesting another
<dl> of arguments. Anything else is rejected.
"""

import re

from bs4 import BeautifulSoup, NavigableString, Tag

from iss_graphql.errors import ReferenceParseError

from .base import ArgumentDescriptor, DataBlock, ReferenceDescriptor

PATH_PATTERN = re.compile(r"/iss/(.*)")
PLACEHOLDER_PATTERN = re.compile(r"\[(\w+)\]")
TYPE_LABEL = "Type:"


def parse_reference(body: str | bytes) -> ReferenceDescriptor:
    """Parse a reference page into a ReferenceDescriptor."""
    doc = BeautifulSoup(body, "html.parser")

    header = doc.select_one("body > h1")
    if header is None:
        raise ReferenceParseError("reference page has no <h1> header")

    match = PATH_PATTERN.search(header.get_text())
    if not match:
        raise ReferenceParseError(f"no /iss/ path in header {header.get_text()!r}")
    path = match.group(1).strip()

    blocks = [_parse_block(dt) for dt in doc.select("body > dl > dt")]
    if not blocks:
        raise ReferenceParseError(f"reference {path!r} documents no blocks")

    return ReferenceDescriptor(
        path=path,
        required_args=parse_required_arguments(path),
        blocks=blocks,
    )


def parse_required_arguments(path: str) -> list[str]:
    """Return the [name] placeholders of a path, in order, without repeats."""
    arguments: list[str] = []
    for name in PLACEHOLDER_PATTERN.findall(path):
        if name not in arguments:
            arguments.append(name)
    return arguments


def _parse_block(block_dt: Tag) -> DataBlock:
    words = block_dt.get_text().split()
    if not words:
        raise ReferenceParseError("block header without a name")
    name = words[0]

    details = block_dt.find_next_sibling()
    if details is None or details.name != "dd":
        raise ReferenceParseError(f"block {name!r} has no details node")

    return DataBlock(
        name=name,
        description=_direct_pre_text(details),
        args=[_parse_argument(name, dt) for dt in details.select("dl > dt")],
    )


def _parse_argument(block_name: str, arg_dt: Tag) -> ArgumentDescriptor:
    name = arg_dt.get_text().strip()

    meta = arg_dt.find_next_sibling()
    if meta is None or meta.name != "dd":
        raise ReferenceParseError(f"argument {block_name}.{name} has no details node")

    return ArgumentDescriptor(
        name=name,
        description=_direct_pre_text(meta),
        declared_type=_type_label(block_name, name, meta),
    )


def _type_label(block_name: str, arg_name: str, meta: Tag) -> str:
    label = None
    for child in meta.find_all("strong", recursive=False):
        if TYPE_LABEL in child.get_text():
            label = child
            break
    if label is None:
        raise ReferenceParseError(f"argument {block_name}.{arg_name} has no {TYPE_LABEL} label")

    node = label.next_sibling
    if node is None:
        raise ReferenceParseError(f"argument {block_name}.{arg_name} has an empty {TYPE_LABEL} label")
    if isinstance(node, NavigableString):
        return str(node).strip()
    return node.get_text().strip()


def _direct_pre_text(node: Tag) -> str:
    pre = node.find("pre", recursive=False)
    if pre is None:
        return ""
    return pre.get_text().strip()
