"""Report aggregation engine."""

from hirevo.reports.company_report import CompanyMetrics, CompanyReportAggregator, compute_company_metrics
from hirevo.reports.earnings import RateEarnings, calculate_earnings, calculate_rate_earnings
from hirevo.reports.invoice_metadata import InvoiceMetadata, decode_invoice_metadata, invoice_total
from hirevo.reports.triggers import ReportTriggers
from hirevo.reports.user_report import UserMetrics, UserReportAggregator

__all__ = [
    "CompanyMetrics",
    "CompanyReportAggregator",
    "compute_company_metrics",
    "RateEarnings",
    "calculate_earnings",
    "calculate_rate_earnings",
    "InvoiceMetadata",
    "decode_invoice_metadata",
    "invoice_total",
    "ReportTriggers",
    "UserMetrics",
    "UserReportAggregator",
]
