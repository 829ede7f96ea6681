"""
Privacy Policy
"""

import streamlit as st

from ledger.ui import page_setup

page_setup("/privacy", "Privacy Policy", "🔒")

st.title("🔒 Privacy Policy")
st.caption("Effective Date: November 1, 2025")

st.markdown("""
The Albany Ledger ("we," "us," or "our") respects your privacy and is committed to protecting your
personal information. This Privacy Policy explains how we collect, use, and safeguard data when you
use our mobile application ("The Albany Ledger" or "the App").

### 1. Information We Collect

**a. Information You Provide**

We may collect personal information that you voluntarily share with us, such as:

- Name, email address, and phone number when you create an account or join our mailing list
- Information you submit through app features (such as issue reports, feedback, or survey responses)

**b. Automatically Collected Information**

When you use the App, we may automatically collect:

- Device information (such as model, operating system, unique identifiers)
- App usage data (such as screens visited, features used, crash logs)
- Location information (only if you grant permission within the App)

### 2. How We Use Information

We use your information to:

- Provide, maintain, and improve the App's functionality
- Respond to questions, feedback, or support requests
- Send notifications and updates about community meetings, alerts, and news
- Monitor usage to ensure reliability, performance, and security
- Comply with legal obligations or resolve disputes

We do not sell or rent your personal information to third parties.

### 3. Data Sharing and Disclosure

We may share limited information only in the following situations:

- **Service Providers:** With trusted vendors who assist us in operating the App (for example, hosting, analytics, or email delivery)
- **Legal Requirements:** If required by law, court order, or government request
- **Aggregate or De-Identified Data:** We may share summarized, non-identifiable information for research or reporting purposes

### 4. Data Retention

We retain your personal information only as long as necessary to fulfill the purposes described in
this policy or as required by law. You may request deletion of your account and data at any time by
contacting us.

### 5. Security

We implement reasonable technical and administrative safeguards to protect your data against
unauthorized access, alteration, disclosure, or destruction. However, no system is completely secure,
and we cannot guarantee absolute protection.

### 6. Your Rights and Choices

You may:

- Access, update, or delete your account information
- Opt out of notifications or email updates
- Revoke location access at any time via your device settings

### 7. Children's Privacy

The Albany Ledger is intended for use by individuals aged 13 and older. We do not knowingly collect
personal information from children under 13. If we become aware that a child's data has been
collected, we will delete it promptly.

### 8. Links to Other Sites

The App may include links to external websites or third-party services. We are not responsible for
the content or privacy practices of those sites.

### 9. Changes to This Policy

We may update this Privacy Policy from time to time. Any changes will be posted within the App and on
our website, with an updated effective date. Continued use of the App after changes means you accept
the revised policy.
""")
