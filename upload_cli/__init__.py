"""Command line client for the upload gate API"""
