# flexstruct/units.py
"""
Physical units.

Benchmark inputs are quoted in the units of the original publications
(MPa, mm, kg/m^3, ...). phun() returns the factor that converts a quantity
given in the named unit into consistent SI units:

    E = 71240.0 * phun("MPa")     # 7.124e10 Pa
    b = 0.6 * phun("mm")          # 6e-4 m
"""

_UNITS = {
    # length
    "M": 1.0,
    "MM": 1.0e-3,
    "CM": 1.0e-2,
    "KM": 1.0e3,
    "IN": 0.0254,
    "FT": 0.3048,
    # time, frequency
    "S": 1.0,
    "SEC": 1.0,
    "MS": 1.0e-3,
    "MIN": 60.0,
    "HZ": 1.0,
    # mass
    "KG": 1.0,
    "G": 1.0e-3,
    "T": 1.0e3,
    # force
    "N": 1.0,
    "KN": 1.0e3,
    "MN": 1.0e6,
    "LBF": 4.4482216152605,
    # pressure, stress
    "PA": 1.0,
    "KPA": 1.0e3,
    "MPA": 1.0e6,
    "GPA": 1.0e9,
    "PSI": 6894.757293168,
    # density
    "KG/M^3": 1.0,
    "G/CM^3": 1.0e3,
    "T/MM^3": 1.0e12,
}


def phun(unit: str) -> float:
    """
    SI multiplier of a unit name (case-insensitive).

    Because case is ignored, names that differ only in case share one entry.
    The reading used is the one common in structural input: "mm" is the
    millimetre (never the megametre), "ms" the millisecond (never the
    megasecond), "MN" the meganewton (never the millinewton), "m" the metre,
    "t" the tonne and "g" the gram.

    Raises:
        ValueError: If the unit is unknown
    """
    key = unit.strip().upper().replace(" ", "")
    try:
        return _UNITS[key]
    except KeyError:
        raise ValueError(f"Unknown unit '{unit}'") from None
