"""Command line interface for artifact-deploy"""
