from __future__ import annotations
import sys, platform, datetime, unicodedata

from runestr import __version__ as app_ver, __dev__ as is_dev

def _ensure_utf8_stdout() -> None:
    reconfigure = getattr(sys.stdout, "reconfigure", None)
    if reconfigure is not None:
        reconfigure(encoding="utf-8")

def _get_versions() -> dict[str, str]:
    import msgpack

    return {
        "app": app_ver,
        "python": platform.python_version(),
        "msgpack": ".".join(map(str, msgpack.version)),
        "unicode": unicodedata.unidata_version,
    }

def banner() -> str:
    v = _get_versions()
    today = datetime.date.today().isoformat()

    # Only use ANSI styling if stdout is a TTY (interactive terminal)
    if sys.stdout.isatty():
        BOLD, DIM, RESET = "\x1b[1m", "\x1b[2m", "\x1b[0m"
    else:
        BOLD, DIM, RESET = "", "", ""

    dev_marker = " (dev)" if is_dev else ""
    return (
        f"{BOLD} \U0001f524 runestr (ᚱ){RESET} • {v['app']}{dev_marker}\n"
        f"{DIM}Python {v['python']} • msgpack {v['msgpack']} • Unicode {v['unicode']} • {today}{RESET}\n"
    )

def print_banner() -> None:
    _ensure_utf8_stdout()
    print(banner())
