"""Mixed alphanumeric version ordering.

Versions are compared without any grammar: runs of digits compare as
arbitrary-precision numbers ("000020" == "20", "1.30.5" > "1.8.5") and every
other character compares case-insensitively ("alpha24" < "Lima10").
"""

from functools import cmp_to_key

from codebit_core.models import VersionOrder


def _is_digit(ch: str) -> bool:
    # ASCII only: digits from other scripts would make the order intransitive
    return "0" <= ch <= "9"


def _digit_run_end(s: str, i: int) -> int:
    n = len(s)
    while i < n and _is_digit(s[i]):
        i += 1
    return i


def _compare_digit_runs(a: str, xa: int, ea: int, b: str, xb: int, eb: int) -> int:
    """Compare a[xa:ea] and b[xb:eb] as unsigned integers of any length."""
    # Extra leading digits on the longer run must all be zero for the runs to be comparable
    while ea - xa > eb - xb:
        if a[xa] != "0":
            return 1
        xa += 1
    while eb - xb > ea - xa:
        if b[xb] != "0":
            return -1
        xb += 1

    while xa < ea:
        if a[xa] != b[xb]:
            return 1 if a[xa] > b[xb] else -1
        xa += 1
        xb += 1
    return 0


def compare_versions(a: str, b: str) -> int:
    """
    Compare two version strings.

    Returns:
        -1 if a sorts before b, 0 if they are equivalent, 1 if a sorts after b.
    """
    ia, ib = 0, 0
    la, lb = len(a), len(b)
    while True:
        if ia >= la:
            return 0 if ib >= lb else -1
        if ib >= lb:
            return 1

        ca, cb = a[ia], b[ib]
        if _is_digit(ca) and _is_digit(cb):
            ea = _digit_run_end(a, ia + 1)
            eb = _digit_run_end(b, ib + 1)
            result = _compare_digit_runs(a, ia, ea, b, ib, eb)
            if result:
                return result
            ia, ib = ea, eb
            continue

        fa, fb = ca.casefold(), cb.casefold()
        if fa != fb:
            return 1 if fa > fb else -1
        ia += 1
        ib += 1


def version_order(remote: str, local: str) -> VersionOrder:
    """Classify a master copy's version against the local copy's."""
    result = compare_versions(remote, local)
    if result == 0:
        return VersionOrder.EQUAL
    if result > 0:
        return VersionOrder.REMOTE_NEWER
    return VersionOrder.LOCAL_NEWER


version_key = cmp_to_key(compare_versions)
