#!/usr/bin/env python3
"""
Refill missing or placeholder camp registration details from donor profiles
Usage: python scripts/fix_registrations.py
"""
import sys
import os
sys.path.append(os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from raktsarthi.database.database import SessionLocal
from raktsarthi.services.camp_registration import backfill_registrations

def fix_registrations():
    db = SessionLocal()
    
    try:
        result = backfill_registrations(db)
        print(f"✅ Processed {result['camps_processed']} camp(s)")
        print(f"🔧 Fixed: {result['fixed']}")
        if result["errors"]:
            print(f"⚠️  Registrations with missing donors: {result['errors']}")
        
    except Exception as e:
        print(f"❌ Error fixing registrations: {e}")
        db.rollback()
        sys.exit(1)
    finally:
        db.close()

if __name__ == "__main__":
    fix_registrations()
