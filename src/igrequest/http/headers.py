"""Header file parsing utilities.

Headers loaded here are applied as per-request overrides on top of the
default header set, so a file can pin a value the defaults would compute.
"""

from pathlib import Path
from typing import Dict, Iterable, Mapping, Optional


def merge_headers(*layers: Optional[Mapping[str, Optional[str]]]) -> Dict[str, Optional[str]]:
    """Merge header mappings, later layers winning over earlier ones.

    Names are compared case-insensitively, as HTTP does. A replaced header
    takes the spelling of the layer that set it last. None values are kept
    so a later layer can mark a header as unset.

    Example:
        >>> merge_headers({'User-Agent': 'a'}, {'user-agent': 'b'})
        {'user-agent': 'b'}
    """
    merged: Dict[str, Optional[str]] = {}
    names: Dict[str, str] = {}

    for layer in layers:
        for name, value in (layer or {}).items():
            previous = names.get(name.lower())
            if previous is not None:
                del merged[previous]
            merged[name] = value
            names[name.lower()] = name

    return merged


def parse_header_lines(lines: Iterable[str]) -> Dict[str, str]:
    """Parse ``Name: value`` lines into a dict.

    Comments (``#``), blank lines and lines without a colon are skipped.
    Later lines win over earlier ones with the same name, in any case.
    """
    headers = []

    for line in lines:
        line = line.strip()

        if not line or line.startswith('#'):
            continue

        if ':' in line:
            name, value = line.split(':', 1)
            headers.append({name.strip(): value.strip()})

    return merge_headers(*headers)


def load_headers_from_file(header_file: str) -> Dict[str, str]:
    """Load HTTP headers from file.

    File format is simple key: value pairs, one per line.

    Args:
        header_file: Path to header file

    Returns:
        Dictionary of header name to value

    Example file format:
        X-IG-Connection-Type: MOBILE(LTE)
        X-IG-App-Locale: de_DE
    """
    header_path = Path(header_file)

    if not header_path.exists():
        return {}

    with open(header_path, 'r') as f:
        return parse_header_lines(f)
