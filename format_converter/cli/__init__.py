"""
Format Converter CLI
Interactive console front end
"""
