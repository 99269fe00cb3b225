"""Схемы модуля активов"""
