"""
Seed assumption settings from public market data.

Medians come from the Census ACS API (income, rent, taxes, insurance,
utilities) and from the HMDA loan tables on BigQuery (price, loan size,
rate) for a single CBSA.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Dict, Mapping, Optional

import requests
from google.cloud import bigquery

from .errors import MarketDataError
from .inputs import DEFAULT_SETTINGS
from .schemas import MarketDefaults

logger = logging.getLogger(__name__)


class CensusACSClient:
    """Pulls CBSA medians from the ACS detailed tables."""

    BASE_URL = "https://api.census.gov/data"
    GEO_KEY = "metropolitan statistical area/micropolitan statistical area"

    # metric -> (column, divisor that brings the raw figure to the unit we keep)
    ACS_METRICS: Dict[str, tuple] = {
        "monthly_income": ("B19013_001E", 12),  # annual household income
        "monthly_rent": ("B25064_001E", 1),
        "annual_property_taxes": ("B25103_001E", 1),
        "annual_home_insurance": ("B25141_001E", 1),
        "electricity": ("B25132_001E", 1),
        "gas": ("B25133_001E", 1),
        "water_sewer": ("B25134_001E", 12),  # reported annually
        "other_fuel": ("B25135_001E", 12),  # reported annually
    }
    UTILITY_METRICS = ("electricity", "gas", "water_sewer", "other_fuel")

    def __init__(
        self,
        api_key: Optional[str],
        dataset: str = "acs/acs5",
        session: Optional[requests.Session] = None,
    ) -> None:
        self.api_key = api_key
        self.dataset = dataset
        self.session = session or requests.Session()

    def fetch_housing_metrics(self, cbsa: str, *, year: int = 2023) -> Dict[str, Any]:
        columns = ["NAME"] + sorted(column for column, _ in self.ACS_METRICS.values())
        params = {"get": ",".join(columns), "for": f"{self.GEO_KEY}:{cbsa}"}
        if self.api_key:
            params["key"] = self.api_key

        url = f"{self.BASE_URL}/{year}/{self.dataset}"
        logger.debug("Querying ACS %s for CBSA %s", url, cbsa)
        response = self.session.get(url, params=params, timeout=30)
        response.raise_for_status()
        data = response.json()
        if not data or len(data) < 2:
            raise MarketDataError(f"ACS query returned no rows for CBSA {cbsa}")

        row = dict(zip(data[0], data[1]))
        metrics: Dict[str, Any] = {"name": row.get("NAME", f"CBSA {cbsa}")}
        for key, (column, divisor) in self.ACS_METRICS.items():
            raw_value = _to_float(row.get(column))
            if raw_value is None or raw_value < 0:
                # ACS encodes suppressed medians as large negative sentinels.
                logger.warning("ACS %s (%s) missing for CBSA %s", key, column, cbsa)
                metrics[key] = 0.0
            else:
                metrics[key] = raw_value / divisor
        metrics["monthly_utilities"] = sum(
            metrics.pop(key) for key in self.UTILITY_METRICS
        )
        return metrics


class HMDAClient:
    """Median property value, loan amount and rate from the HMDA BigQuery tables."""

    def __init__(
        self,
        *,
        table: str,
        client: Optional[bigquery.Client] = None,
        project: Optional[str] = None,
    ) -> None:
        self.client = client if client is not None else bigquery.Client(project=project)
        self.table = table

    def fetch_cbsa_summary(self, cbsa: str, *, year: int = 2023) -> Dict[str, Any]:
        query = f"""
            SELECT
              CAST(derived_msa_md AS STRING) AS cbsa,
              ANY_VALUE(derived_msa_md_name) AS cbsa_name,
              APPROX_QUANTILES(CAST(property_value AS FLOAT64), 2)[OFFSET(1)] AS median_property_value,
              APPROX_QUANTILES(CAST(loan_amount AS FLOAT64), 2)[OFFSET(1)] AS median_loan_amount,
              AVG(CAST(interest_rate AS FLOAT64)) AS avg_interest_rate
            FROM `{self.table}`
            WHERE as_of_year = @year
              AND CAST(derived_msa_md AS STRING) = @cbsa
              AND property_value IS NOT NULL
              AND loan_amount IS NOT NULL
              AND interest_rate IS NOT NULL
            GROUP BY cbsa
        """
        job_config = bigquery.QueryJobConfig(
            query_parameters=[
                bigquery.ScalarQueryParameter("year", "INT64", year),
                bigquery.ScalarQueryParameter("cbsa", "STRING", cbsa),
            ]
        )
        logger.debug("Querying HMDA table %s for CBSA %s", self.table, cbsa)
        rows = list(self.client.query(query, job_config=job_config).result())
        if not rows:
            raise MarketDataError(f"No HMDA results for CBSA {cbsa} in {self.table}")
        row = rows[0]
        return {
            "name": row["cbsa_name"],
            "property_value": row["median_property_value"] or 0.0,
            "loan_amount": row["median_loan_amount"] or 0.0,
            "interest_rate": row["avg_interest_rate"] or 0.0,
        }


@dataclass
class MarketDataAssembler:
    """Combine ACS and HMDA pulls into one set of market defaults."""

    acs_client: CensusACSClient
    hmda_client: HMDAClient

    def build_defaults(
        self, cbsa: str, *, acs_year: int = 2023, hmda_year: int = 2023
    ) -> MarketDefaults:
        acs = self.acs_client.fetch_housing_metrics(cbsa, year=acs_year)
        hmda = self.hmda_client.fetch_cbsa_summary(cbsa, year=hmda_year)
        return MarketDefaults(
            cbsa=cbsa,
            name=hmda.get("name") or acs.get("name") or f"CBSA {cbsa}",
            monthly_income=acs.get("monthly_income", 0.0),
            monthly_rent=acs.get("monthly_rent", 0.0),
            property_value=hmda.get("property_value", 0.0),
            loan_amount=hmda.get("loan_amount", 0.0),
            interest_rate=hmda.get("interest_rate", 0.0),
            annual_property_taxes=acs.get("annual_property_taxes", 0.0),
            annual_home_insurance=acs.get("annual_home_insurance", 0.0),
            monthly_utilities=acs.get("monthly_utilities", 0.0),
        )


def market_settings(
    defaults: MarketDefaults, base: Optional[Mapping[str, Any]] = None
) -> Dict[str, Any]:
    """Overlay the market medians onto a settings mapping."""
    settings = dict(DEFAULT_SETTINGS if base is None else base)
    settings.update(
        {
            "home-price": round(defaults.property_value, 2),
            "down-payment": round(defaults.down_payment_pct, 2),
            "interest-rate": round(defaults.interest_rate, 3),
            "property-tax": round(defaults.property_tax_rate_pct, 3),
            "home-insurance": round(defaults.annual_home_insurance, 2),
            "buyer-utilities": round(defaults.monthly_utilities, 2),
            "renter-utilities": round(defaults.monthly_utilities, 2),
            "monthly-rent": round(defaults.monthly_rent, 2),
            "monthly-income": round(defaults.monthly_income, 2),
        }
    )
    return settings


def _to_float(value: Optional[str]) -> Optional[float]:
    if value in (None, "", "null"):
        return None
    try:
        return float(value)
    except (TypeError, ValueError) as exc:
        raise MarketDataError(f"Could not convert ACS value '{value}' to float") from exc
