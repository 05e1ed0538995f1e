"""
Fiscal modules: thin glue between platform features and the tax engine.

Modules own their own DTOs and delegate every tax computation to
``fiscal_engines.FiscalEngine``.
"""
