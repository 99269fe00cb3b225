"""Схемы HR модуля"""
