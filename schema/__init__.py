"""Request and response models for the UMKM RAG API"""
