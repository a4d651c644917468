"""
Exercise Media Ingestion Service

Crawls fitness sites for exercise demonstration videos and stores them
as name -> video URL media records.
"""
