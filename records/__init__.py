"""Clinic records application.

Models, serializers, services and REST endpoints for patients, doctors,
appointments, medical history, ward admissions with their vitals,
medication and IV schedules and doctor visits, and billing.
"""
