"""
Controllers Package

Flask blueprints exposing the services over JSON.
"""
