"""
Small numeric helpers shared by the progress and streak engines
"""


def percentage(part: int, whole: int) -> int:
    """
    Integer percentage of part/whole, rounded half up

    Returns 0 when whole is not positive.
    """
    if whole <= 0:
        return 0
    # Integer arithmetic keeps x.5 cases exact
    return (200 * part + whole) // (2 * whole)
