"""Road Registry - Services"""
