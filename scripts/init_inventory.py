#!/usr/bin/env python3
"""
Make sure every blood bank's embedded inventory lists all 8 blood groups
Usage: python scripts/init_inventory.py
"""
import sys
import os
sys.path.append(os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from raktsarthi.database.database import SessionLocal
from raktsarthi.models.blood_bank import BloodBank
from raktsarthi.services.inventory import fill_embedded_inventory

def init_inventory():
    db = SessionLocal()
    
    try:
        blood_banks = db.query(BloodBank).all()
        print(f"🏦 Found {len(blood_banks)} blood bank(s)")
        
        updated = 0
        for blood_bank in blood_banks:
            added = fill_embedded_inventory(blood_bank)
            if added:
                updated += 1
                print(f"  ➕ {blood_bank.name}: added {added} blood group(s)")
        
        db.commit()
        print(f"✅ Inventory initialized ({updated} blood bank(s) updated)")
        
    except Exception as e:
        print(f"❌ Error initializing inventory: {e}")
        db.rollback()
        sys.exit(1)
    finally:
        db.close()

if __name__ == "__main__":
    init_inventory()
