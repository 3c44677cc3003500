"""
Case adjustment - make a replacement follow the casing of the text it replaces
"""


def adjust_case(original: str, replacement: str) -> str:
    """
    Harmonize replacement with the casing of original.

    TEST -> REPLACEMENT, test -> replacement, Test -> Replacement.
    Anything else ("TeSt", "Hello World", "") leaves replacement untouched.

    Casing goes through str.upper()/str.lower(), so scripts without case and
    characters whose case mapping changes length (e.g. "ß") follow whatever
    Python does with them.
    """
    if not original:
        return replacement

    upper = original.upper()
    lower = original.lower()

    if original == upper and original != lower:
        return replacement.upper()

    if original == lower and original != upper:
        return replacement.lower()

    # Only the first character is checked against upper case
    if original[0] == original[0].upper() and original[1:] == original[1:].lower():
        return replacement[:1].upper() + replacement[1:].lower()

    return replacement
