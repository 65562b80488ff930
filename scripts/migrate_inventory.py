#!/usr/bin/env python3
"""
Copy embedded blood-bank inventories into the standalone inventory table
Usage: python scripts/migrate_inventory.py
"""
import sys
import os
sys.path.append(os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from raktsarthi.database.database import SessionLocal
from raktsarthi.models.blood_bank import BloodBank
from raktsarthi.services.inventory import SOURCE_COLLECTION, sync_standalone_inventory

def migrate_inventory():
    db = SessionLocal()
    
    try:
        blood_banks = db.query(BloodBank).all()
        print(f"🏦 Found {len(blood_banks)} blood bank(s)")
        
        migrated = 0
        for blood_bank in blood_banks:
            source = sync_standalone_inventory(db, blood_bank)
            if source != SOURCE_COLLECTION:
                migrated += 1
                print(f"  📦 {blood_bank.name}: standalone inventory seeded from {source} store")
        
        db.commit()
        print(f"✅ Migration complete ({migrated} inventory record(s) created or seeded)")
        
    except Exception as e:
        print(f"❌ Error migrating inventory: {e}")
        db.rollback()
        sys.exit(1)
    finally:
        db.close()

if __name__ == "__main__":
    migrate_inventory()
