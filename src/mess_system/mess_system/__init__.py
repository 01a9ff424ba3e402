"""Mess System package.

Multi-tenant mess (dining hall) management organized by feature modules
(tenants, users, attendance, ledger, cash, ...) with a thin Flask controller
layer over service/repository layers and a single JSON document store.
"""
