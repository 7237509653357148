"""Logging, input validation and unit helpers"""
