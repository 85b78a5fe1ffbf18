"""Route modules for the standards API"""
