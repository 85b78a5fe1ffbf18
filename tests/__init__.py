"""Test package for the engineering standards server"""
