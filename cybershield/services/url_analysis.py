"""Heuristic red flags for URLs shown in phishing scenarios."""
import re
from urllib.parse import urlsplit

IP_ADDRESS_RE = re.compile(r"\d{1,3}\.\d{1,3}\.\d{1,3}\.\d{1,3}")

COMMON_BRANDS = ["google", "microsoft", "amazon", "apple", "facebook", "paypal", "netflix"]
URL_SHORTENERS = ["bit.ly", "tinyurl", "t.co", "goo.gl", "ow.ly"]
SUSPICIOUS_TLDS = [".xyz", ".top", ".club", ".work", ".click", ".link"]


def _typosquat_pattern(brand: str) -> re.Pattern:
    # "paypal" -> p.?a.?y.?p.?a.?l : tolerates one inserted character per gap
    return re.compile(".?".join(re.escape(ch) for ch in brand), re.IGNORECASE)


_BRAND_PATTERNS = {brand: _typosquat_pattern(brand) for brand in COMMON_BRANDS}


def _hostname(url: str) -> str:
    if "://" not in url:
        url = "http://" + url
    return (urlsplit(url).hostname or "").lower()


def analyze_suspicious_url(url: str) -> list[str]:
    """Return human-readable red flags found in ``url`` (empty when none)."""
    lowered = url.lower()
    host = _hostname(url)
    red_flags = []

    if IP_ADDRESS_RE.search(url):
        red_flags.append("Uses IP address instead of domain name")

    for brand, pattern in _BRAND_PATTERNS.items():
        if pattern.search(url) and brand not in lowered:
            red_flags.append(f"Possible typosquatting of {brand}")

    if host.count(".") > 3:
        red_flags.append("Excessive subdomains")

    if any(host == s or host.endswith("." + s) or host.startswith(s + ".") for s in URL_SHORTENERS):
        red_flags.append("Uses URL shortener to hide destination")

    if any(host.endswith(tld) for tld in SUSPICIOUS_TLDS):
        red_flags.append("Uses uncommon/suspicious TLD")

    return red_flags
