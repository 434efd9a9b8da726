"""Gradio 검색 UI"""
