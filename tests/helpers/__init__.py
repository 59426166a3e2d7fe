from helpers.naive_diff import (
    Item,
    NaiveLCS,
    ChangeVerifier,
    same_key,
    same_value,
    items,
    lcs_length,
    edit_distance,
    verify_changes,
)


__all__ = [
    "Item",
    "NaiveLCS",
    "ChangeVerifier",
    "same_key",
    "same_value",
    "items",
    "lcs_length",
    "edit_distance",
    "verify_changes",
]
