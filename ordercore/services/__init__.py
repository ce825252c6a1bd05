"""Order intake services"""
