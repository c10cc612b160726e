"""TeamHub services: invitation tokens, team lifecycle, org variant"""
