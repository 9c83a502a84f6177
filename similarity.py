def levenshtein_distance(a: str, b: str) -> int:
    """Unit-cost insert/delete/substitute edit distance."""
    if a == b:
        return 0
    if not a:
        return len(b)
    if not b:
        return len(a)

    # keep the shorter string on the inner loop; distance is symmetric
    if len(a) < len(b):
        a, b = b, a

    prev = list(range(len(b) + 1))
    for i, ca in enumerate(a, 1):
        curr = [i]
        for j, cb in enumerate(b, 1):
            cost = 0 if ca == cb else 1
            curr.append(
                min(
                    prev[j] + 1,  # deletion
                    curr[j - 1] + 1,  # insertion
                    prev[j - 1] + cost,  # substitution
                )
            )
        prev = curr
    return prev[-1]


def similarity(a: str, b: str) -> float:
    longest = max(len(a), len(b), 1)
    return 1.0 - levenshtein_distance(a, b) / longest
