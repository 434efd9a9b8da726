"""검색 API"""
