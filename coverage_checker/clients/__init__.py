"""
HTTP clients for the external providers.
"""
from coverage_checker.clients.geocoder import ZipGeocoder
from coverage_checker.clients.opencellid import OpenCellIdClient
from coverage_checker.clients.sessions import SessionProvider

__all__ = ['ZipGeocoder', 'OpenCellIdClient', 'SessionProvider']
