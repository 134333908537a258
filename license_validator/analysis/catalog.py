"""License catalog for display normalization.

Maps declared license names to canonical KnownLicense entries. Lookups are
used for report display only and never influence the allow-list decision.
Uses the license-expression library to recognize SPDX identifiers that are
not in the curated catalog.
"""
from __future__ import annotations

import re
from typing import Mapping, Optional

from license_expression import ExpressionError, get_spdx_licensing

from license_validator.models.artifact import DeclaredLicense
from license_validator.models.validation import KnownLicense

# Initialize SPDX licensing for parsing
_licensing = get_spdx_licensing()

SPDX_URL_TEMPLATE = "https://spdx.org/licenses/{key}.html"

# Canonical licenses shipped with the catalog
DEFAULT_LICENSES: dict[str, str] = {
    "Apache-2.0": "https://www.apache.org/licenses/LICENSE-2.0",
    "MIT": "https://opensource.org/licenses/MIT",
    "BSD-2-Clause": "https://opensource.org/licenses/BSD-2-Clause",
    "BSD-3-Clause": "https://opensource.org/licenses/BSD-3-Clause",
    "ISC": "https://opensource.org/licenses/ISC",
    "0BSD": "https://opensource.org/licenses/0BSD",
    "Unlicense": "https://unlicense.org/",
    "CC0-1.0": "https://creativecommons.org/publicdomain/zero/1.0/",
    "Zlib": "https://opensource.org/licenses/Zlib",
    "PSF-2.0": "https://opensource.org/licenses/Python-2.0",
    "MPL-2.0": "https://www.mozilla.org/en-US/MPL/2.0/",
    "EPL-1.0": "https://www.eclipse.org/legal/epl-v10.html",
    "EPL-2.0": "https://www.eclipse.org/legal/epl-2.0/",
    "CDDL-1.0": "https://opensource.org/licenses/CDDL-1.0",
    "LGPL-2.1": "https://www.gnu.org/licenses/old-licenses/lgpl-2.1.html",
    "LGPL-3.0": "https://www.gnu.org/licenses/lgpl-3.0.html",
    "GPL-2.0": "https://www.gnu.org/licenses/old-licenses/gpl-2.0.html",
    "GPL-3.0": "https://www.gnu.org/licenses/gpl-3.0.html",
    "AGPL-3.0": "https://www.gnu.org/licenses/agpl-3.0.html",
}

# Common long-form spellings found in artifact metadata
DEFAULT_ALIASES: dict[str, str] = {
    "the apache software license, version 2.0": "Apache-2.0",
    "apache license, version 2.0": "Apache-2.0",
    "apache license 2.0": "Apache-2.0",
    "apache 2.0": "Apache-2.0",
    "apache 2": "Apache-2.0",
    "asl 2.0": "Apache-2.0",
    "mit license": "MIT",
    "the mit license": "MIT",
    "bsd license": "BSD-3-Clause",
    "new bsd license": "BSD-3-Clause",
    "the bsd license": "BSD-3-Clause",
    "simplified bsd license": "BSD-2-Clause",
    "mozilla public license 2.0": "MPL-2.0",
    "mozilla public license version 2.0": "MPL-2.0",
    "eclipse public license 1.0": "EPL-1.0",
    "eclipse public license - v 1.0": "EPL-1.0",
    "eclipse public license 2.0": "EPL-2.0",
    "eclipse public license - v 2.0": "EPL-2.0",
    "gnu lesser general public license": "LGPL-2.1",
    "gnu general public license, version 2": "GPL-2.0",
    "gnu general public license v3": "GPL-3.0",
    "gpl-2.0-only": "GPL-2.0",
    "gpl-3.0-only": "GPL-3.0",
    "lgpl-2.1-only": "LGPL-2.1",
    "lgpl-3.0-only": "LGPL-3.0",
    "agpl-3.0-only": "AGPL-3.0",
}

_WHITESPACE = re.compile(r"\s+")


def _alias_key(name: str) -> str:
    """Normalize a license name for alias lookup."""
    return _WHITESPACE.sub(" ", name.strip()).casefold()


def _url_key(url: str) -> str:
    """Normalize a URL for comparison (scheme, www and trailing slash ignored)."""
    key = url.strip().casefold()
    for prefix in ("https://", "http://"):
        if key.startswith(prefix):
            key = key[len(prefix):]
    if key.startswith("www."):
        key = key[len("www."):]
    return key.rstrip("/")


class LicenseCatalog:
    """Read-only mapping of canonical licenses.

    Lookup order for a declared license:

    1. exact canonical name,
    2. alias table (case and whitespace insensitive),
    3. canonical URL match,
    4. SPDX identifier recognized by license-expression.
    """

    def __init__(
        self,
        licenses: Optional[Mapping[str, str]] = None,
        aliases: Optional[Mapping[str, str]] = None,
        use_spdx: bool = True,
    ) -> None:
        """Initialize the catalog.

        Args:
            licenses: Canonical name -> URL. Defaults to DEFAULT_LICENSES.
            aliases: Alternative spelling -> canonical name. Defaults to
                DEFAULT_ALIASES.
            use_spdx: Fall back to the SPDX license list for unknown names.
        """
        source = DEFAULT_LICENSES if licenses is None else licenses
        self._licenses: dict[str, KnownLicense] = {
            name: KnownLicense(name=name, url=url) for name, url in source.items()
        }
        self._aliases: dict[str, str] = {
            _alias_key(alias): canonical
            for alias, canonical in (
                DEFAULT_ALIASES if aliases is None else aliases
            ).items()
            if canonical in self._licenses
        }
        for name in self._licenses:
            self._aliases.setdefault(_alias_key(name), name)
        self._by_url: dict[str, KnownLicense] = {
            _url_key(known.url): known for known in self._licenses.values()
        }
        self._use_spdx = use_spdx

    @classmethod
    def with_extra(cls, extra: Optional[Mapping[str, str]]) -> LicenseCatalog:
        """Create the default catalog extended with additional entries."""
        licenses = dict(DEFAULT_LICENSES)
        if extra:
            licenses.update(extra)
        return cls(licenses=licenses)

    def __contains__(self, name: object) -> bool:
        return name in self._licenses

    def __len__(self) -> int:
        return len(self._licenses)

    def get(self, name: str) -> Optional[KnownLicense]:
        """Get a catalog entry by exact canonical name."""
        return self._licenses.get(name)

    def lookup(self, declared: DeclaredLicense) -> Optional[KnownLicense]:
        """Resolve a declared license to a catalog entry.

        Args:
            declared: License as declared by an artifact.

        Returns:
            Matching KnownLicense, or None if nothing matches.
        """
        name = (declared.name or "").strip()
        if name:
            known = self._licenses.get(name)
            if known is not None:
                return known
            canonical = self._aliases.get(_alias_key(name))
            if canonical is not None:
                return self._licenses[canonical]

        if declared.url:
            known = self._by_url.get(_url_key(declared.url))
            if known is not None:
                return known

        if name and self._use_spdx:
            return self._lookup_spdx(name)
        return None

    def _lookup_spdx(self, name: str) -> Optional[KnownLicense]:
        """Resolve a single SPDX identifier via license-expression.

        Compound expressions (``MIT OR Apache-2.0``) are not single licenses
        and resolve to None.
        """
        try:
            parsed = _licensing.parse(name, validate=True)
        except ExpressionError:
            return None
        key = getattr(parsed, "key", None)
        if not key:
            return None
        key = str(key)
        known = self._licenses.get(key)
        if known is None:
            canonical = self._aliases.get(_alias_key(key))
            if canonical is not None:
                return self._licenses[canonical]
            return KnownLicense(name=key, url=SPDX_URL_TEMPLATE.format(key=key))
        return known
