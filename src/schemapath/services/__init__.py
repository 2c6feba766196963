"""Service layer — operations returning ServiceResult.

Services may import from domain, core and config.
The core imports only telemetry and result from here.
"""
