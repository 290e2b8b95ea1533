from dataclasses import dataclass

@dataclass(frozen=True)
class PowerSums:
    gross_kw: float   # bruttoleistungSumme
    net_kw: float     # nettoleistungSumme
