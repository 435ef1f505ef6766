"""GlamFlow salon booking backend"""
