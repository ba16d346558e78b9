"""Parsers for zypper ``--xmlout`` output."""

import re
from dataclasses import dataclass, field

from lxml import etree

from fleetgate.interfaces.exceptions import RepositoryParseError

LOCKED_PREFIX = "System management is locked"

_LEADING_NUMBER = re.compile(r"^\s*(\d+(?:\.\d+)?)")


@dataclass(frozen=True)
class ZypperProduct:
    """A product entry from ``zypper products``."""

    name: str
    version: str
    arch: str = ""
    installed: bool = False


@dataclass(frozen=True)
class ZypperPatch:
    """A patch entry from ``zypper list-patches``."""

    name: str
    category: str
    status: str
    severity: str = ""


@dataclass
class ZypperStream:
    """Parsed zypper output document."""

    messages: list[str] = field(default_factory=list)
    prompts: list[str] = field(default_factory=list)
    products: list[ZypperProduct] = field(default_factory=list)
    patches: list[ZypperPatch] = field(default_factory=list)

    @property
    def locked_message(self) -> str | None:
        """The "system management is locked" message, if present."""
        return next((m for m in self.messages if m.startswith(LOCKED_PREFIX)), None)

    @property
    def first_prompt(self) -> str | None:
        """Text of the first interactive prompt in document order."""
        return self.prompts[0] if self.prompts else None

    def has_product(self, name: str, version: str) -> bool:
        """Exact (name, version) existence test."""
        return any(p.name == name and p.version == version for p in self.products)


def _parser() -> etree.XMLParser:
    return etree.XMLParser(resolve_entities=False, no_network=True, recover=False)


def _text(element: etree._Element) -> str:
    return "".join(element.itertext()).strip()


def parse_stream(xml: str | bytes) -> ZypperStream:
    """Parse a zypper ``--xmlout`` document.

    Args:
        xml: Raw XML output

    Returns:
        Parsed stream with messages, prompts, products and patches

    Raises:
        RepositoryParseError: If the output is empty or not well-formed XML
    """
    if isinstance(xml, str):
        xml = xml.encode()
    if not xml.strip():
        raise RepositoryParseError("zypper returned no output")

    try:
        root = etree.fromstring(xml, parser=_parser())
    except etree.XMLSyntaxError as e:
        raise RepositoryParseError(f"zypper output is not valid XML: {e}") from e

    if root.tag != "stream":
        raise RepositoryParseError(f"Unexpected zypper document root <{root.tag}>")

    stream = ZypperStream()
    stream.messages = [_text(m) for m in root.iter("message")]

    for prompt in root.iter("prompt"):
        text_element = prompt.find("text")
        if text_element is not None:
            stream.prompts.append(_text(text_element))
        else:
            stream.prompts.append(prompt.get("text") or _text(prompt))

    for product in root.iterfind("product-list/product"):
        stream.products.append(
            ZypperProduct(
                name=product.get("name", ""),
                version=product.get("version", ""),
                arch=product.get("arch", ""),
                installed=product.get("installed") == "true",
            )
        )

    for update in root.iter("update"):
        if update.get("kind", "patch") != "patch":
            continue
        stream.patches.append(
            ZypperPatch(
                name=update.get("name", ""),
                category=update.get("category", ""),
                # list-patches only lists needed patches unless --all is given
                status=update.get("status", "needed"),
                severity=update.get("severity", ""),
            )
        )

    return stream


def leading_version(version: str | None) -> float:
    """Truncate a dotted version string to its leading numeric value.

    ``"10.2.4-211-g12b091b"`` gives ``10.2``; non-numeric input gives ``0.0``.
    """
    if not version:
        return 0.0
    match = _LEADING_NUMBER.match(version)
    return float(match.group(1)) if match else 0.0
