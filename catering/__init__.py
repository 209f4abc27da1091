"""
Service catering scolaire: checkout, paiements groupés (batch) et réconciliation
des statuts de paiement (Midtrans Snap + encaissements caisse).
"""
