"""RFID attendance reporting package.

Organised by feature modules (students, sessions, attendance, reports) with a
thin Flask controller layer over service/repository layers. The aggregation
and export code under ``attendance`` and ``reports`` performs no I/O.
"""
