"""Biomarker panel completion.

``impute`` synthesizes a plausible panel from the pre-biomarker subtotal when
the user withholds lab values; ``normalize_supplied`` converts a manual panel
into the stored form. Both derive A1C and the triglyceride/HDL ratio the
same way.
"""

from types import MappingProxyType
from typing import Mapping

from .domain import BiomarkerInput, BiomarkerPanel
from .engine import round_to


LOW_RISK_MAX_SUBTOTAL = 15   # inclusive
MID_RISK_MAX_SUBTOTAL = 30   # exclusive

LOW_RISK_PROFILE: Mapping[str, float] = MappingProxyType({
    "o2_sat": 97, "pulse": 78, "bp_upper": 122, "bp_lower": 80,
    "bs_f": 90, "bs_am": 118, "HDL": 60, "LDL": 120, "Trig": 130, "HsCRP": 0.1,
})
MID_RISK_PROFILE: Mapping[str, float] = MappingProxyType({
    "o2_sat": 95, "pulse": 84, "bp_upper": 134, "bp_lower": 86,
    "bs_f": 120, "bs_am": 160, "HDL": 50, "LDL": 150, "Trig": 160, "HsCRP": 0.2,
})
HIGH_RISK_PROFILE: Mapping[str, float] = MappingProxyType({
    "o2_sat": 93, "pulse": 92, "bp_upper": 146, "bp_lower": 92,
    "bs_f": 180, "bs_am": 200, "HDL": 40, "LDL": 180, "Trig": 180, "HsCRP": 0.3,
})


def estimate_a1c(bs_f: float, bs_am: float) -> float:
    """A1C from mean glucose (mg/dL) via the ADAG linear relation."""
    return round_to(((bs_f + bs_am) / 2 + 46.7) / 28.7, 2)


def trig_hdl_ratio(trig: float, hdl: float) -> float:
    return round_to(trig / hdl, 2)


def select_profile(pre_biomarker_subtotal: float) -> Mapping[str, float]:
    if pre_biomarker_subtotal <= LOW_RISK_MAX_SUBTOTAL:
        return LOW_RISK_PROFILE
    if pre_biomarker_subtotal < MID_RISK_MAX_SUBTOTAL:
        return MID_RISK_PROFILE
    return HIGH_RISK_PROFILE


def impute(pre_biomarker_subtotal: float) -> BiomarkerPanel:
    profile = select_profile(pre_biomarker_subtotal)
    return BiomarkerPanel(
        **profile,
        A1C=estimate_a1c(profile["bs_f"], profile["bs_am"]),
        trig_hdl_ratio=trig_hdl_ratio(profile["Trig"], profile["HDL"]),
        imputed=True,
    )


def normalize_hscrp(value: float, unit: str | None) -> float:
    # Anything not explicitly mg/L is treated as mg/dL and converted
    if unit is not None and unit.lower() == "mg/l":
        return value
    return value / 10


def normalize_supplied(biomarkers: BiomarkerInput) -> BiomarkerPanel:
    a1c = biomarkers.A1C
    if a1c is None:
        a1c = estimate_a1c(biomarkers.bs_f, biomarkers.bs_am)
    return BiomarkerPanel(
        o2_sat=biomarkers.o2_sat,
        pulse=biomarkers.pulse,
        bp_upper=biomarkers.bp_upper,
        bp_lower=biomarkers.bp_lower,
        bs_f=biomarkers.bs_f,
        bs_am=biomarkers.bs_am,
        HDL=biomarkers.HDL,
        LDL=biomarkers.LDL,
        Trig=biomarkers.Trig,
        HsCRP=normalize_hscrp(biomarkers.HsCRP, biomarkers.hscrp_unit),
        A1C=a1c,
        # Never trusted from the client
        trig_hdl_ratio=trig_hdl_ratio(biomarkers.Trig, biomarkers.HDL),
        imputed=False,
    )
