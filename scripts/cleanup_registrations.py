#!/usr/bin/env python3
"""
Delete camp registrations that have no donor id or no usable name
Usage: python scripts/cleanup_registrations.py
"""
import sys
import os
sys.path.append(os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from raktsarthi.database.database import SessionLocal
from raktsarthi.services.camp_registration import cleanup_registrations

def main():
    db = SessionLocal()
    
    try:
        result = cleanup_registrations(db)
        print(f"✅ Processed {result['camps_processed']} camp(s)")
        print(f"🗑️  Removed {result['removed']} invalid registration(s)")
        
    except Exception as e:
        print(f"❌ Error cleaning up registrations: {e}")
        db.rollback()
        sys.exit(1)
    finally:
        db.close()

if __name__ == "__main__":
    main()
