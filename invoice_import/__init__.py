"""CSV invoice importer: itemized billing exports -> client invoices with a fixed 10% markup."""

__version__ = "0.1.0"
