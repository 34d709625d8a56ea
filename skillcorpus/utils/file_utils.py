from pathlib import Path

SKILL_FILE_SUFFIX = "-SKILL.md"


def skill_name_from_path(path: str | Path) -> str:
    """``aiohttp-SKILL.md`` -> ``aiohttp``; any other name -> its stem."""
    name = Path(path).name
    if name.endswith(SKILL_FILE_SUFFIX):
        return name[: -len(SKILL_FILE_SUFFIX)]
    return Path(path).stem


def skill_filename(name: str) -> str:
    keepchars = (".", "_", "-")
    safe = "".join(c for c in name if c.isalnum() or c in keepchars).strip()
    return f"{safe}{SKILL_FILE_SUFFIX}"


def read_text(path: str | Path, encoding: str | None = None) -> str:
    """Read a text file, trying utf-8 first and latin-1 as a fallback."""
    if encoding:
        with open(path, "r", encoding=encoding) as fh:
            return fh.read()
    for enc in ("utf-8", "latin-1"):
        try:
            with open(path, "r", encoding=enc) as fh:
                return fh.read()
        except (UnicodeDecodeError, UnicodeError):
            continue
    with open(path, "r", encoding="utf-8", errors="replace") as fh:
        return fh.read()
