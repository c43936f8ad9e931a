"""Files shipped inside the capella_probe distribution"""
