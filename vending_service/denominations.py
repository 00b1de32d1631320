"""
denominations.py — Legal Coin Denominations

A single value type describes every coin the machine handles. Face values are
in euro cents; the display asset is the image a front end shows for the coin.
"""

from typing import Dict, Iterable, List

from pydantic import BaseModel, ConfigDict, Field


class Denomination(BaseModel):
    """
    A coin face value and its display asset.

    Attributes:
        face_value (int): Value in minor currency units (cents). Must be positive.
        display_asset (str): Relative path of the coin image.
    """
    model_config = ConfigDict(frozen=True)

    face_value: int = Field(..., gt=0)
    display_asset: str


DENOMINATIONS: Dict[int, Denomination] = {
    d.face_value: d
    for d in (
        Denomination(face_value=200, display_asset="asset/img/2_euros.png"),
        Denomination(face_value=100, display_asset="asset/img/1_euro.png"),
        Denomination(face_value=50, display_asset="asset/img/50_centimes.png"),
        Denomination(face_value=20, display_asset="asset/img/20_centimes.png"),
        Denomination(face_value=10, display_asset="asset/img/10_centimes.png"),
        Denomination(face_value=5, display_asset="asset/img/5_centimes.png"),
        Denomination(face_value=2, display_asset="asset/img/2_centimes.png"),
        Denomination(face_value=1, display_asset="asset/img/1_centime.png"),
    )
}

# Coins a new machine is stocked with for giving change
CHANGE_FACE_VALUES: List[int] = [200, 100, 50, 20, 10]


def get_denomination(face_value: int) -> Denomination:
    """Raises ValueError for a face value outside the legal set."""
    try:
        return DENOMINATIONS[face_value]
    except KeyError:
        raise ValueError(f"Unknown denomination: {face_value}") from None


def describe_coins(coins: Iterable[int]) -> List[Denomination]:
    """Maps a list of face values (e.g. dispensed change) to Denomination values."""
    return [get_denomination(c) for c in coins]
