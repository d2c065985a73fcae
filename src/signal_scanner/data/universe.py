"""Instrument universes for market scans.

The popular universe is a fixed list of liquid Taiwan-listed and OTC
names. The full universe is loaded from a CSV file with ``code`` and
``name`` columns, since the complete listing changes too often to ship.
"""

import csv
from pathlib import Path

from signal_scanner.core.config import get_config
from signal_scanner.core.exceptions import SignalScannerError
from signal_scanner.core.models import Instrument, ScanScope

POPULAR_STOCKS: tuple[Instrument, ...] = (
    # Semiconductors and tech
    Instrument("2330", "台積電"),
    Instrument("2317", "鴻海"),
    Instrument("2454", "聯發科"),
    Instrument("2308", "台達電"),
    Instrument("2303", "聯電"),
    Instrument("3711", "日月光投控"),
    Instrument("3231", "緯創"),
    Instrument("2382", "廣達"),
    Instrument("6669", "緯穎"),
    Instrument("2357", "華碩"),
    Instrument("2356", "英業達"),
    Instrument("2353", "宏碁"),
    Instrument("2379", "瑞昱"),
    Instrument("3037", "欣興"),
    Instrument("3034", "聯詠"),
    Instrument("2395", "研華"),
    Instrument("2408", "南亞科"),
    Instrument("2412", "中華電"),
    Instrument("3045", "台灣大"),
    Instrument("4904", "遠傳"),
    # Finance
    Instrument("2881", "富邦金"),
    Instrument("2882", "國泰金"),
    Instrument("2891", "中信金"),
    Instrument("2886", "兆豐金"),
    Instrument("2884", "玉山金"),
    Instrument("2885", "元大金"),
    Instrument("2892", "第一金"),
    Instrument("2880", "華南金"),
    Instrument("2883", "開發金"),
    Instrument("2887", "台新金"),
    # Traditional and shipping
    Instrument("2603", "長榮"),
    Instrument("2609", "陽明"),
    Instrument("2615", "萬海"),
    Instrument("2618", "長榮航"),
    Instrument("2610", "華航"),
    Instrument("2002", "中鋼"),
    Instrument("1101", "台泥"),
    Instrument("1102", "亞泥"),
    Instrument("1301", "台塑"),
    Instrument("1303", "南亞"),
    Instrument("1326", "台化"),
    Instrument("1216", "統一"),
    Instrument("9910", "豐泰"),
    Instrument("9904", "寶成"),
    # OTC and others
    Instrument("8069", "元太"),
    Instrument("6488", "環球晶"),
    Instrument("5483", "中美晶"),
    Instrument("3105", "穩懋"),
    Instrument("3293", "鈊象"),
    Instrument("3529", "力旺"),
    Instrument("5904", "寶雅"),
    Instrument("8299", "群聯"),
    Instrument("6274", "台燿"),
    Instrument("3324", "雙鴻"),
    Instrument("3661", "世芯-KY"),
    Instrument("5274", "信驊"),
    Instrument("2455", "全新"),
    Instrument("3008", "大立光"),
    Instrument("1590", "亞德客-KY"),
    Instrument("1519", "華城"),
)


def find_instrument(code: str) -> Instrument:
    """Return the popular-list entry for ``code``, or a bare instrument named by its code."""
    for instrument in POPULAR_STOCKS:
        if instrument.code == code:
            return instrument
    return Instrument(code, code)


def load_universe_file(path: Path) -> list[Instrument]:
    """Read instruments from a CSV file with ``code`` and ``name`` columns.

    Args:
        path: Location of the CSV file.

    Returns:
        Instruments in file order, skipping blank codes.

    """
    with path.open(encoding="utf-8") as f:
        reader = csv.DictReader(f)
        return [
            Instrument(row["code"].strip(), (row.get("name") or row["code"]).strip())
            for row in reader
            if row["code"].strip()
        ]


def load_universe(scope: ScanScope, path: Path | None = None) -> list[Instrument]:
    """Return the instruments to scan for ``scope``.

    Args:
        scope: ``POPULAR`` for the built-in list, ``ALL`` for the full file.
        path: Universe file for ``ALL``; defaults to ``scanner.universe_file``.

    Raises:
        SignalScannerError: If ``ALL`` is requested without a universe file.

    """
    if scope is ScanScope.POPULAR:
        return list(POPULAR_STOCKS)
    if path is None:
        configured = str(get_config().get("scanner.universe_file", "") or "")
        if not configured:
            msg = "Full universe requested but scanner.universe_file is not set"
            raise SignalScannerError(msg)
        path = Path(configured)
    return load_universe_file(path)
